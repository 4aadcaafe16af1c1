from enum import Enum


class DeploymentOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
