"""
Application context

Services are built once per app and handed to routers through a FastAPI
dependency, so tests can build an app around an in-memory store.
"""
from dataclasses import dataclass, field

from fastapi import Request

from rover_shop.config import Settings
from rover_shop.services.submissions import SubmissionService
from rover_shop.services.team_registry import TeamRegistry
from rover_shop.storage.base import DocumentStore


@dataclass
class AppContext:
    settings: Settings
    store: DocumentStore
    teams: TeamRegistry = field(init=False)
    submissions: SubmissionService = field(init=False)

    def __post_init__(self):
        self.teams = TeamRegistry(self.store, self.settings)
        self.submissions = SubmissionService(self.store, self.teams, self.settings.scoring)

    async def aclose(self) -> None:
        close = getattr(self.store, "aclose", None)
        if close is not None:
            await close()


def get_context(request: Request) -> AppContext:
    return request.app.state.context
