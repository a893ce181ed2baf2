from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from app.models.enumerations import ActivityCategory


class ActivityRecord(BaseModel):
    """
    One activity row as read from the records store.

    The scoring engine only reads snapshots of these; the CRUD layer owns them.
    Category-specific attributes (venue, quartile, role, degree, ...) live in
    ``payload`` under the store's column names.
    """

    category: ActivityCategory
    user_id: int
    id: Optional[int] = None
    title: Optional[str] = None
    occurred_on: Optional[date] = Field(
        default=None,
        description="Activity date, display only"
    )
    year: Optional[int] = Field(
        default=None,
        description="Explicit year column where the store has one (research, thank-you books)"
    )
    payload: Dict[str, Any] = Field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Read a payload attribute."""
        return self.payload.get(key, default)


class PointsDateRange(BaseModel):
    """
    Half-open date window [start_inclusive, end_exclusive) for period scoring.
    """

    start_inclusive: datetime
    end_exclusive: datetime

    @model_validator(mode="after")
    def validate_order(self):
        if self.end_exclusive <= self.start_inclusive:
            raise ValueError("end_exclusive must be after start_inclusive")
        return self

    @classmethod
    def for_dates(cls, start: date, end: date) -> "PointsDateRange":
        """Build a UTC window from calendar dates (end is exclusive)."""
        return cls(
            start_inclusive=datetime(start.year, start.month, start.day, tzinfo=timezone.utc),
            end_exclusive=datetime(end.year, end.month, end.day, tzinfo=timezone.utc),
        )

    def contains(self, moment: datetime) -> bool:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return self.start_inclusive <= moment < self.end_exclusive
