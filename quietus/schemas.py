from __future__ import annotations

from datetime import datetime
from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Organization(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    feed_url: str = Field(..., min_length=1)
    # 1-based registry line, for diagnostics only
    line_number: int | None = None

    @field_validator("feed_url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"feed url must be absolute: {value!r}")
        return value


class FeedItem(BaseModel):
    """One feed entry. A timestamp the feed does not carry is None."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    published: datetime | None = None
    updated: datetime | None = None


class FeedDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: Literal["rss", "rdf", "atom"]
    title: str = ""
    items: list[FeedItem] = Field(default_factory=list)


class Evaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    organization: Organization
    last_published: datetime | None = None
    inactive_days: int | None = None

    @property
    def evaluable(self) -> bool:
        return self.inactive_days is not None


class InactivityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    organization: Organization
    inactive_days: int

    @property
    def name(self) -> str:
        return self.organization.name


class FeedFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    organization: Organization
    error_code: str
    message: str


class SweepResult(BaseModel):
    """Aggregate of one evaluation pass over the registry, in registry order."""

    inactive: list[InactivityResult] = Field(default_factory=list)
    evaluations: list[Evaluation] = Field(default_factory=list)
    failures: list[FeedFailure] = Field(default_factory=list)

    @property
    def checked(self) -> int:
        return len(self.evaluations) + len(self.failures)
