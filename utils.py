# utils.py

import os
import subprocess
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Headers added by a Cloudflare tunnel in front of the listener
TUNNEL_HEADERS = ("cf-ray", "cf-connecting-ip", "cf-visitor")


class CommandTimeout(Exception):
    def __init__(self, command: str, timeout: float):
        super().__init__(f"Command timed out after {timeout}s: {command}")
        self.command = command
        self.timeout = timeout


class ShellCommandRunner:
    """
    Runs a command line through the shell and reports its exit code.

    The child inherits the environment and stdout/stderr; output is never captured.
    """

    def __init__(self, cwd: Optional[str] = None, timeout: Optional[float] = None):
        self.cwd = cwd
        self.timeout = timeout

    def run(self, command: str) -> int:
        cwd = self.cwd or os.getcwd()
        logger.info(f"Executing: {command}")
        logger.debug(f"Working directory: {cwd}")
        try:
            result = subprocess.run(command, cwd=cwd, shell=True, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            raise CommandTimeout(command, self.timeout)

        if result.returncode != 0:
            logger.error(f"Command failed with exit code: {result.returncode}")
        else:
            logger.debug(f"Command executed successfully: {command}")
        return result.returncode


def is_tunnel_request(headers) -> bool:
    return any(name in headers for name in TUNNEL_HEADERS)


def request_head_size(method: str, target: str, headers) -> int:
    """
    Size in bytes of the request line and header block as sent on the wire,
    including the blank line that ends the headers.
    """
    size = len(f"{method} {target} HTTP/1.1\r\n".encode("latin-1", "replace"))
    for name, value in headers.raw:
        size += len(name) + 2 + len(value) + 2
    return size + 2
