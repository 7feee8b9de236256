"""Tests for keyring setup."""

import io
import os
import subprocess
from unittest.mock import patch

import pytest

from nspawn.config.settings import KEYRING_PATH
from nspawn.errors import KeyringDeclined, KeyringError, PrivilegeRequired
from nspawn.operations.keyring import KeyringDecision, KeyringManager, ask_user, decide


@pytest.mark.parametrize("answer, expected", [
    ("y", KeyringDecision.ACCEPTED),
    (" YES\n", KeyringDecision.ACCEPTED),
    ("n", KeyringDecision.DECLINED),
    ("No", KeyringDecision.DECLINED),
    ("maybe", KeyringDecision.UNRECOGNIZED),
    ("", KeyringDecision.UNRECOGNIZED),
    (None, KeyringDecision.UNRECOGNIZED),
])
def test_decide(answer, expected):
    assert decide(answer) is expected


def never_ask(question):
    raise AssertionError("should not prompt")


def test_existing_keyring_is_left_alone(config, catalog, present_keyring):
    manager = KeyringManager(config, catalog, ask=never_ask, privileged=lambda: False)

    with patch("nspawn.operations.keyring.subprocess.run") as run:
        manager.ensure_keyring()

    run.assert_not_called()


@pytest.mark.parametrize("answer", ["n", "whatever"])
def test_declined_or_unrecognized_answer(config, catalog, answer):
    manager = KeyringManager(config, catalog, ask=lambda q: answer, privileged=lambda: True)

    with pytest.raises(KeyringDeclined) as excinfo:
        manager.ensure_keyring()

    assert excinfo.value.exit_code == 2


def test_accepted_without_privilege(config, catalog, keyring_path):
    manager = KeyringManager(config, catalog, ask=lambda q: "y", privileged=lambda: False)

    with pytest.raises(PrivilegeRequired) as excinfo:
        manager.ensure_keyring()

    assert excinfo.value.exit_code == 1
    assert keyring_path in str(excinfo.value)


def test_accepted_imports_key_and_removes_temp_file(config, catalog, keyring_path):
    manager = KeyringManager(config, catalog, ask=lambda q: "yes", privileged=lambda: True)
    seen = {}

    def fake_run(command, **kwargs):
        key_path = command[-1]
        with open(key_path, 'rb') as f:
            seen['key'] = f.read()
        seen['command'] = command
        return subprocess.CompletedProcess(command, 0, "", "")

    with patch("nspawn.operations.keyring.subprocess.run", side_effect=fake_run):
        manager.ensure_keyring()

    assert seen['key'] == b"KEY"
    assert seen['command'][:4] == [
        "gpg", "--no-default-keyring", f"--keyring={keyring_path}", "--import"
    ]

    assert not os.path.exists(seen['command'][-1])


def test_gpg_failure_still_removes_temp_file(config, catalog):
    manager = KeyringManager(config, catalog, ask=lambda q: "y", privileged=lambda: True)
    paths = []

    def fake_run(command, **kwargs):
        paths.append(command[-1])
        return subprocess.CompletedProcess(command, 2, "", "gpg: no valid OpenPGP data found")

    with patch("nspawn.operations.keyring.subprocess.run", side_effect=fake_run):
        with pytest.raises(KeyringError):
            manager.ensure_keyring()

    assert not os.path.exists(paths[0])


def test_default_keyring_is_the_importd_one(config, catalog, keyring_path):
    assert KEYRING_PATH == "/etc/systemd/import-pubring.gpg"
    assert KeyringManager(config, catalog).keyring_path == keyring_path


def test_explicit_keyring_path(config, catalog, tmp_path):
    path = str(tmp_path / "ring.gpg")

    assert KeyringManager(config, catalog, keyring_path=path).keyring_path == path


def test_closed_stdin_counts_as_no_answer(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    answer = ask_user("Import? [y/n] ")

    assert answer == ""
    assert decide(answer) is KeyringDecision.UNRECOGNIZED
