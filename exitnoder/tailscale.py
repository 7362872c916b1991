"""
Tailscale daemon client.

Talks to tailscaled through the `tailscale` command line binary:
`status --json` to read state and `set --exit-node=` to change it.
"""

import json
import logging
import subprocess
from typing import Optional

from .models import TailscaleStatus

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT = 10

# Backend states in which the daemon cannot route through an exit node
STOPPED_STATES = ("Stopped", "NoState")


class TailscaleError(Exception):
    """Base class for failures talking to Tailscale."""

    message = "Tailscale error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class NotRunningError(TailscaleError):
    message = ("Tailscale is not running. Please ensure Tailscale is "
               "installed and running.")


class ConnectionFailedError(TailscaleError):
    message = "Failed to connect to Tailscale"


class InvalidResponseError(TailscaleError):
    message = "Invalid response from Tailscale"


class CommandFailedError(TailscaleError):

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Tailscale command failed: {detail}")


class TailscaleController:
    """Handles Tailscale exit node operations."""

    def __init__(self, tailscale_exe: str = "tailscale", timeout: int = COMMAND_TIMEOUT):
        self.tailscale_exe = tailscale_exe
        self.timeout = timeout

    def _run(self, args) -> subprocess.CompletedProcess:
        cmd = [self.tailscale_exe] + list(args)
        logger.debug("Exec: %s", cmd)
        try:
            return subprocess.run(
                cmd, capture_output=True, text=True, check=False, timeout=self.timeout
            )
        except FileNotFoundError:
            logger.error("Binary not found: %s", self.tailscale_exe)
            raise NotRunningError(
                f"Tailscale not found at {self.tailscale_exe}. Make sure Tailscale is installed."
            )
        except subprocess.TimeoutExpired:
            logger.error("Timed out after %ss: %s", self.timeout, cmd)
            raise ConnectionFailedError()
        except OSError as e:
            logger.error("Exec failed: %s", e)
            raise ConnectionFailedError(f"Failed to connect to Tailscale: {e}")

    def get_status(self) -> TailscaleStatus:
        """Query the daemon for peers and the active exit node."""
        res = self._run(["status", "--json"])

        # `status` exits non-zero when logged out or stopped but may still
        # print a usable document, so try to parse before giving up.
        try:
            data = json.loads(res.stdout) if res.stdout.strip() else None
        except json.JSONDecodeError:
            data = None

        if not isinstance(data, dict):
            if res.returncode != 0:
                logger.warning("status failed (%s): %s", res.returncode, res.stderr.strip())
                raise NotRunningError()
            raise InvalidResponseError()

        status = TailscaleStatus.from_json(data)
        if status.backend_state in STOPPED_STATES:
            raise NotRunningError()

        logger.debug("Status: %d exit nodes, current %s",
                     len(status.exit_nodes), status.exit_node_id)
        return status

    def set_exit_node(self, target: Optional[str]):
        """Route through `target` (DNS name, IP or id), or disable when None."""
        res = self._run(["set", f"--exit-node={target or ''}"])
        if res.returncode != 0:
            detail = (res.stderr or res.stdout).strip() or f"exit status {res.returncode}"
            logger.error("set --exit-node=%s failed: %s", target or "", detail)
            raise CommandFailedError(detail)
        logger.info("Exit node %s", f"set to {target}" if target else "disabled")

    def disable_exit_node(self):
        self.set_exit_node(None)
