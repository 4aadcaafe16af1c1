# dependencies.py

from dataclasses import dataclass

from fastapi import Request

from config import Settings
from deploy_trigger import CommandRunner, DeploymentTrigger
from utils import ShellCommandRunner


@dataclass
class ServerContext:
    settings: Settings
    trigger: DeploymentTrigger


def build_context(settings: Settings, runner: CommandRunner = None) -> ServerContext:
    if runner is None:
        runner = ShellCommandRunner(cwd=settings.working_dir, timeout=settings.command_timeout)
    return ServerContext(settings=settings, trigger=DeploymentTrigger(runner))


def get_context(request: Request) -> ServerContext:
    return request.app.state.context
