"""Runtime configuration models for the compliance validator."""

from __future__ import annotations

import hashlib
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PolicyConfig(BaseModel):
    """Return-to-office policy rules, immutable for a validation run."""

    model_config = ConfigDict(frozen=True)

    min_office_days_per_week: int = Field(default=3, ge=0)
    total_weekdays_per_week: int = Field(default=5, ge=1, le=5)
    rolling_window_weeks: int = Field(default=12, ge=1)
    top_weeks_to_count: int = Field(default=8, ge=1)
    threshold_percentage: float = Field(default=0.6, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "PolicyConfig":
        if self.min_office_days_per_week > self.total_weekdays_per_week:
            raise ValueError(
                f"min_office_days_per_week ({self.min_office_days_per_week}) cannot exceed "
                f"total_weekdays_per_week ({self.total_weekdays_per_week})"
            )
        if self.top_weeks_to_count > self.rolling_window_weeks:
            raise ValueError(
                f"top_weeks_to_count ({self.top_weeks_to_count}) cannot exceed "
                f"rolling_window_weeks ({self.rolling_window_weeks})"
            )
        return self

    @property
    def required_percentage(self) -> float:
        return self.threshold_percentage * 100

    @property
    def required_weekly_percentage(self) -> float:
        return self.min_office_days_per_week * 100 / self.total_weekdays_per_week

    def fingerprint(self) -> str:
        """Short stable hash identifying this rule set."""
        payload = self.model_dump_json()
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


class HolidaySourceConfig(BaseModel):
    country_code: Optional[str] = None
    company_name: Optional[str] = None
    only_weekdays: bool = True
    base_url: str = "https://date.nager.at"
    request_timeout_seconds: int = Field(default=10, ge=1)
    # country code -> company name -> holiday names the company observes
    company_filters: Dict[str, Dict[str, List[str]]] = Field(default_factory=dict)


class ValidationSettings(BaseModel):
    default_mode: Literal["strict", "average", "rolling", "first-weeks"] = "average"
    debug: bool = False


class RuntimeConfig(BaseModel):
    metadata: dict = Field(default_factory=dict)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    holidays: HolidaySourceConfig = Field(default_factory=HolidaySourceConfig)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
