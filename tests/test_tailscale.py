"""
Daemon client over the tailscale CLI, with subprocess faked out.
"""

import json
import subprocess

import pytest

from exitnoder import tailscale
from exitnoder.tailscale import (
    CommandFailedError,
    ConnectionFailedError,
    InvalidResponseError,
    NotRunningError,
    TailscaleController,
)


class FakeRun:
    """Stands in for subprocess.run, recording every command."""

    def __init__(self, returncode=0, stdout="", stderr="", exc=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.exc = exc
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_run(monkeypatch):
    def _install(**kwargs):
        fake = FakeRun(**kwargs)
        monkeypatch.setattr(tailscale.subprocess, "run", fake)
        return fake
    return _install


def test_get_status(fake_run, status_json):
    fake = fake_run(stdout=json.dumps(status_json))

    status = TailscaleController("/usr/local/bin/tailscale").get_status()

    assert fake.calls == [["/usr/local/bin/tailscale", "status", "--json"]]
    assert status.exit_node_id == "n2"
    assert len(status.exit_nodes) == 3


def test_missing_binary(fake_run):
    fake_run(exc=FileNotFoundError())
    with pytest.raises(NotRunningError):
        TailscaleController().get_status()


def test_timeout(fake_run):
    fake_run(exc=subprocess.TimeoutExpired(["tailscale"], 10))
    with pytest.raises(ConnectionFailedError):
        TailscaleController().get_status()


def test_garbage_output(fake_run):
    fake_run(stdout="not json")
    with pytest.raises(InvalidResponseError):
        TailscaleController().get_status()


def test_daemon_unreachable(fake_run):
    fake_run(returncode=1, stderr="failed to connect to local tailscaled")
    with pytest.raises(NotRunningError):
        TailscaleController().get_status()


def test_stopped_backend(fake_run, status_json):
    status_json["BackendState"] = "Stopped"
    fake_run(returncode=1, stdout=json.dumps(status_json))
    with pytest.raises(NotRunningError):
        TailscaleController().get_status()


def test_set_exit_node(fake_run):
    fake = fake_run()
    TailscaleController().set_exit_node("se-sto-wg-001.mullvad.ts.net")
    assert fake.calls == [["tailscale", "set", "--exit-node=se-sto-wg-001.mullvad.ts.net"]]


def test_disable_exit_node(fake_run):
    fake = fake_run()
    TailscaleController().disable_exit_node()
    assert fake.calls == [["tailscale", "set", "--exit-node="]]


def test_set_exit_node_failure(fake_run):
    fake_run(returncode=1, stderr="invalid value \"nope\" for --exit-node\n")

    with pytest.raises(CommandFailedError) as excinfo:
        TailscaleController().set_exit_node("nope")

    assert str(excinfo.value) == 'Tailscale command failed: invalid value "nope" for --exit-node'
