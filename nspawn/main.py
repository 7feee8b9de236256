"""Main CLI entry point for nspawn."""

import argparse
import sys
import logging

from . import __version__
from .config.settings import Config
from .errors import NspawnError
from .models.image import KNOWN_KINDS, VerificationMode, resolve
from .operations.acquire import AcquireOperation
from .storage.catalog import CatalogClient
from .utils.logger import setup_logging


logger = logging.getLogger(__name__)


def fail(error: Exception):
    """Report a terminal error and exit with its code."""
    logger.debug(f"{type(error).__name__}: {error}")
    print(f"Error: {error}", file=sys.stderr)
    sys.exit(getattr(error, "exit_code", 1))


def handle_list(args):
    """Handle --list."""
    try:
        config = Config()
        catalog = CatalogClient(timeout=config.request_timeout)

        print(f"Listing {config.list_url}")
        print(catalog.fetch_listing(config.list_url), end="")

    except (NspawnError, OSError, ValueError) as e:
        fail(e)


def handle_init(args):
    """Handle --init."""
    try:
        config = Config()
        mode = VerificationMode.SKIP_VERIFICATION if args.skip_verification else VerificationMode.VERIFIED
        spec = resolve(args.init, config.base_url)

        if mode is VerificationMode.SKIP_VERIFICATION:
            print("Warning: image signature verification is disabled")

        report = AcquireOperation(config).acquire(spec, mode)

        print(report.message)
        if report.read_only_cleared:
            print(f"Read-only flag cleared for {report.local_name}")
        if report.details:
            print(report.details)

    except (NspawnError, OSError, ValueError) as e:
        fail(e)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='nspawn',
        description='Fetches, verifies and registers nspawn container images from the nspawn.org hub.',
        epilog=f"SPEC is <distribution>/<release>/<type>, where type is one of: {', '.join(KNOWN_KINDS)}. "
               f"Set NSPAWN_BASEURL to use another catalog."
    )

    parser.add_argument(
        '-i', '--init',
        metavar='SPEC',
        help='Fetch and register the image SPEC, e.g. archlinux/current/tar'
    )
    parser.add_argument(
        '-s', '--skip-verification',
        action='store_true',
        help='Do not verify the image signature'
    )
    parser.add_argument(
        '-l', '--list',
        action='store_true',
        help='List the images available in the catalog'
    )
    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'nspawn {__version__}'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='WARNING',
        help='Set logging level (default: WARNING)'
    )
    parser.add_argument(
        '--log-file',
        help='Log to file in addition to console'
    )

    args = parser.parse_args()

    if args.init is None and not args.list:
        parser.print_help()
        sys.exit(0)

    setup_logging(args.log_level, args.log_file)

    try:
        if args.list:
            handle_list(args)
        if args.init is not None:
            handle_init(args)
    except KeyboardInterrupt:
        print("\nInterrupted, exiting", file=sys.stderr)
        sys.exit(130)


if __name__ == '__main__':
    main()
