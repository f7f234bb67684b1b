"""Admin dashboard assembly."""

import logging

from ..models import DashboardResponse
from ..storage import Database
from .session_auth import Clock, utc_now
from .timeline import fill_daily_series, trailing_window

logger = logging.getLogger(__name__)


class DashboardManager:
    """Builds the admin overview: totals plus the registration timeline."""

    def __init__(self, db: Database, window_days: int = 30, clock: Clock = utc_now):
        """Initialize dashboard manager.

        Args:
            db: Database instance
            window_days: Length of the trailing registration window
            clock: Source of "today" (UTC)
        """
        self.db = db
        self.window_days = window_days
        self._clock = clock

    async def get_overview(self) -> DashboardResponse:
        """Collect counts and the gap-filled registration series."""
        start, end = trailing_window(self._clock(), self.window_days)

        observations = await self.db.count_registrations_by_day(start, end)
        registrations = fill_daily_series(start, end, observations)

        users_count = await self.db.count_users()
        links_count = await self.db.count_links()

        logger.debug(
            f"Dashboard window {start}..{end}: {sum(observations.values())} registrations"
        )

        return DashboardResponse(
            message=f"User registrations for the last {self.window_days} days",
            users_count=users_count,
            links_count=links_count,
            window_start=start,
            window_end=end,
            registrations=registrations,
        )
