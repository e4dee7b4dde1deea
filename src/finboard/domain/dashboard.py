"""Dashboard state holder.

``DashboardController`` is the single writer of the dashboard state. Each
refresh is tagged with a generation number; a response is applied only if
no newer refresh has started since, so a slow fetch for an old period can
never overwrite the summary of the current one.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional

from finboard.domain.aggregation import AggregationEngine
from finboard.domain.entities import DashboardSummary
from finboard.domain.errors import FetchFailed, NoIdentity
from finboard.domain.periods import Period
from finboard.domain.session import SessionProvider

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    NO_IDENTITY = "no_identity"
    FAILED = "failed"


@dataclass(frozen=True)
class DashboardState:
    """What the presentation layer renders."""

    status: LoadStatus = LoadStatus.IDLE
    summary: DashboardSummary = field(default_factory=DashboardSummary.empty)
    period: Optional[Period] = None
    owner_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status == LoadStatus.LOADING


class DashboardController:
    """Owns the current DashboardState and applies only the latest fetch."""

    def __init__(
        self,
        engine: AggregationEngine,
        session: SessionProvider,
        notify: Optional[Callable[[str], None]] = None,
    ):
        """Initialize dashboard controller.

        Args:
            engine: Aggregation engine used for every refresh
            session: Provider of the current user
            notify: Optional callback receiving user-visible error messages
        """
        self.engine = engine
        self.session = session
        self.notify = notify
        self.state = DashboardState()
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def refresh(self, period: Period) -> DashboardState:
        """Load the dashboard for the current user and period.

        Returns the state after this refresh; if a newer refresh started
        while this one was in flight, its result is discarded and the state
        is returned unchanged.
        """
        self._generation += 1
        generation = self._generation

        user = self.session.current_user()
        if user is None:
            logger.info("No authenticated user; dashboard not loaded")
            self.state = DashboardState(status=LoadStatus.NO_IDENTITY, period=period)
            return self.state

        self.state = replace(
            self.state,
            status=LoadStatus.LOADING,
            period=period,
            owner_id=user.id,
            error=None,
        )
        try:
            summary = await self.engine.build_summary(user.id, period)
        except NoIdentity:
            if self._is_current(generation):
                self.state = DashboardState(status=LoadStatus.NO_IDENTITY, period=period)
            return self.state
        except FetchFailed as e:
            if not self._is_current(generation):
                logger.debug("Discarding stale failure for period %s", period)
                return self.state
            # Keep whatever summary was on screen
            self.state = replace(self.state, status=LoadStatus.FAILED, error=e.message)
            if self.notify is not None:
                self.notify(e.message)
            return self.state

        if not self._is_current(generation):
            logger.debug("Discarding stale summary for period %s", period)
            return self.state

        self.state = DashboardState(
            status=LoadStatus.LOADED,
            summary=summary,
            period=period,
            owner_id=user.id,
        )
        return self.state

    def submit(self, period: Period) -> asyncio.Task:
        """Schedule a refresh, cancelling the previously scheduled one.

        Must be called from a running event loop.
        """
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling in-flight refresh")
            self._task.cancel()
        self._task = asyncio.ensure_future(self.refresh(period))
        return self._task

    async def wait(self) -> DashboardState:
        """Wait for the last submitted refresh and return the state."""
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        return self.state
