from collections.abc import AsyncGenerator
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from inkwell.authentication import SessionAuthenticationBackend, SessionStore
from inkwell.core.config import InkwellSettings
from inkwell.stats import StatsAggregator

from .template_manager import TemplateManager


@dataclass
class AppContext:
    """Process-wide state, built once by `create_app()`.

    Every component reaches shared state through this object; nothing is
    kept in module globals. The lifespan owns `engine` and
    `session_factory`; both are `None` outside it.
    """

    settings: InkwellSettings
    sessions: SessionStore
    backend: SessionAuthenticationBackend
    engine: AsyncEngine | None
    session_factory: async_sessionmaker[AsyncSession] | None
    templates: TemplateManager
    stats: StatsAggregator

    def require_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self.session_factory is None:
            msg = "Database not initialized. Start the application lifespan first."
            raise RuntimeError(msg)
        return self.session_factory


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """One `AsyncSession` per request, closed when the response is sent."""
    factory = get_context(request).require_session_factory()
    async with factory() as session:
        yield session
