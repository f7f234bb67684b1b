"""Analytics data models for the admin dashboard."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class DailyCount(BaseModel):
    """Number of registrations on one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = 0
