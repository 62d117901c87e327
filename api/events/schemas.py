"""
Events API schemas (request/response models).
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

AccessibilityTag = Literal["kids", "disabled", "pets"]


class SortOptions(BaseModel):
    param: Literal["earliest", "location"] = "earliest"
    reverse: bool = False
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: list[str] = Field(default_factory=list)
    event_types: list[str] = Field(default_factory=list, alias="eventTypes")
    organizers: list[str] = Field(default_factory=list)
    age_groups: list[str] = Field(default_factory=list, alias="ageGroups")
    accessibility: list[AccessibilityTag] = Field(default_factory=list)
    start_date: date | None = Field(default=None, alias="startDate")
    end_date: date | None = Field(default=None, alias="endDate")
    sort: SortOptions = Field(default_factory=SortOptions)

    @field_validator("categories", "event_types", "organizers", "age_groups", "accessibility", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        # Frontend sends null for untouched multi-selects.
        return [] if value is None else value

    @field_validator("sort", mode="before")
    @classmethod
    def _null_sort(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> Any:
        """
        Accept "YYYY-MM-DD" or a full ISO timestamp; only the date is kept.
        """
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip()).date()
            except ValueError as e:
                raise ValueError(f"Invalid date {value!r}.") from e
        return value


class SearchResponse(BaseModel):
    success: bool
    message: str
    events: list[dict[str, Any]] = Field(default_factory=list)
