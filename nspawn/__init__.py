"""Fetch, verify and register nspawn container images."""

__version__ = "1.0.0"
