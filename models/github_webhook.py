from pydantic import BaseModel, StrictStr
from typing import Optional


class GitHubWebhook(BaseModel):
    ref: Optional[StrictStr] = None
    # Other push-event fields (repository, pusher, commits) are ignored
