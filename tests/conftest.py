"""Shared fixtures for nspawn tests."""

import os
from typing import Dict, List

import pytest

from nspawn.config.settings import Config
from nspawn.storage.machinectl import CommandResult, DaemonGateway


class FakeGateway(DaemonGateway):
    """In-memory stand-in for machinectl."""

    def __init__(self, registered=None, import_ok=True, read_only_ok=True):
        self.registered: Dict[str, str] = dict(registered or {})
        self.import_ok = import_ok
        self.read_only_ok = read_only_ok
        self.calls: List[tuple] = []

    def show_image(self, name):
        self.calls.append(("show_image", name))
        if name in self.registered:
            return CommandResult(0, self.registered[name] + "\n")
        return CommandResult(1, "", f"No image '{name}' known")

    def pull(self, kind, url, name):
        self.calls.append(("pull", kind, url, name))
        return self._register(name)

    def import_unverified(self, kind, path, name):
        self.calls.append(("import_unverified", kind, path, name, os.path.exists(path)))
        return self._register(name)

    def set_read_only(self, name, read_only):
        self.calls.append(("set_read_only", name, read_only))
        return CommandResult(0 if self.read_only_ok else 1)

    def _register(self, name):
        if not self.import_ok:
            return CommandResult(1, "", "Signature verification failed")
        self.registered[name] = f"Name={name}\nReadOnly=no"
        return CommandResult(0)

    def called(self, operation):
        return [call for call in self.calls if call[0] == operation]


class FakeCatalog:
    """Catalog client serving canned answers."""

    def __init__(self, status=200, listing="archlinux/current/tar\n", key=b"KEY", image=b"IMAGE"):
        self.status = status
        self.listing = listing
        self.key = key
        self.image = image
        self.checked: List[str] = []
        self.downloads: List[str] = []

    def check_exists(self, url):
        self.checked.append(url)
        return self.status

    def fetch_listing(self, list_url):
        return self.listing

    def fetch_key(self, key_url, dest):
        with open(dest, 'wb') as f:
            f.write(self.key)

    def download(self, url, dest):
        self.downloads.append(dest)
        with open(dest, 'wb') as f:
            f.write(self.image)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for var in ('NSPAWN_BASEURL', 'NSPAWN_CONFIG'):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def keyring_path(tmp_path):
    return str(tmp_path / "import-pubring.gpg")


@pytest.fixture(autouse=True)
def local_keyring(monkeypatch, keyring_path):
    monkeypatch.setattr("nspawn.operations.keyring.KEYRING_PATH", keyring_path)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def present_keyring(keyring_path):
    with open(keyring_path, 'wb') as f:
        f.write(b"")
    return keyring_path


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def catalog():
    return FakeCatalog()
