import json
import logging
import threading
from typing import Protocol, Union

from pydantic import ValidationError

from models.deployment import DeploymentOutcome
from models.github_webhook import GitHubWebhook
from utils import CommandTimeout

logger = logging.getLogger(__name__)

TRACKED_REFS = ("refs/heads/master", "refs/heads/main")

UPDATE_COMMAND = "git pull"
RESTART_COMMAND = "systemctl --user restart www"


class CommandRunner(Protocol):
    def run(self, command: str) -> int:
        ...


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON literal: {name}")


def is_tracked_push(body: Union[bytes, str]) -> bool:
    """
    Returns True if the body is a GitHub push event for the master or main branch.
    """
    try:
        payload = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.error(f"JSON parse error: {e}")
        return False

    if not isinstance(payload, dict):
        logger.debug("Payload is not a JSON object.")
        return False

    try:
        webhook = GitHubWebhook(**payload)
    except ValidationError:
        logger.debug("Payload 'ref' is not a string.")
        return False

    return webhook.ref in TRACKED_REFS


class DeploymentTrigger:
    """
    Runs the update and restart commands for tracked pushes.

    Only one deployment runs at a time; concurrent callers wait on the lock.
    """

    def __init__(self, runner: CommandRunner):
        self.runner = runner
        self._lock = threading.Lock()

    def deploy(self, body: Union[bytes, str]) -> DeploymentOutcome:
        if not is_tracked_push(body):
            logger.warning("Not a push event to master/main branch")
            return DeploymentOutcome.FAILURE

        with self._lock:
            logger.info("GitHub push event detected, executing deployment...")

            if not self._execute(UPDATE_COMMAND):
                logger.error("Git pull failed")
                return DeploymentOutcome.FAILURE

            if not self._execute(RESTART_COMMAND):
                logger.error("Service restart failed")
                return DeploymentOutcome.FAILURE

        logger.info("Deployment completed successfully")
        return DeploymentOutcome.SUCCESS

    def _execute(self, command: str) -> bool:
        try:
            return self.runner.run(command) == 0
        except CommandTimeout as e:
            logger.error(str(e))
        except OSError as e:
            logger.error(f"Could not execute '{command}': {e}")
        return False
