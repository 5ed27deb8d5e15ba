"""Pydantic models for prompthub.

These schemas define the contract between the retrieval core and its
callers. Prompt matches the PostgreSQL table `prompts` (see
packages/retrieval/schema.sql); SearchRequest and SearchResult are the
inputs and outputs of one retrieval call.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SortBy(str, Enum):
    """Ranking keys a search can be ordered by."""

    RELEVANCE = "relevance"
    DATE = "date"
    VOTES = "votes"
    POPULARITY = "popularity"


class SortDirection(str, Enum):
    """Primary sort direction."""

    ASC = "asc"
    DESC = "desc"


class Prompt(BaseModel):
    """A shareable text prompt.

    Matches PostgreSQL table: prompts

    `owner_id` is None for platform-provided (built-in) prompts.
    `is_anonymous` hides the owner even when one is set.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    content: str
    category: str
    specialty: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    vote_count: int = Field(default=0, ge=0)
    created_at: datetime
    owner_id: Optional[str] = None
    is_anonymous: bool = False
    has_alternate_versions: bool = False

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Timestamps without an offset are taken as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_builtin(self) -> bool:
        """True for prompts provided by the platform."""
        return self.owner_id is None

    @property
    def attributed_owner_id(self) -> Optional[str]:
        """Owner to credit in listings, or None for built-in/anonymous prompts."""
        if self.owner_id is None or self.is_anonymous:
            return None
        return self.owner_id


class SearchRequest(BaseModel):
    """Caller input for one retrieval call.

    `query_text` may embed `tag:`, `category:` and `specialty:` operators.
    Explicit filters are case-insensitive sets; duplicates are harmless.
    """

    model_config = ConfigDict(frozen=True)

    query_text: str = ""
    categories: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    owner_id: Optional[str] = None
    has_alternate_versions: Optional[bool] = None
    sort_by: SortBy = SortBy.RELEVANCE
    sort_direction: SortDirection = SortDirection.DESC
    limit: int = Field(default=20, gt=0)
    offset: int = Field(default=0, ge=0)

    @field_validator("categories", "specialties", "tags", mode="before")
    @classmethod
    def reject_bare_string(cls, v: Any) -> Any:
        """A single string is not a filter set; it would split into characters."""
        if isinstance(v, str):
            raise ValueError("filter values must be a list of strings, not a string")
        if isinstance(v, (set, frozenset)):
            return sorted(v)
        return v


class SearchResult(BaseModel):
    """One page (or several appended pages) of retrieval output.

    Attributes:
        prompts: Ordered prompts in the window, at most `limit` of them
        total: Number of prompts matching the filter, ignoring pagination
        offset: Offset of the first prompt in `prompts`
        limit: Window size that produced `prompts`
        has_more: Whether prompts remain after this window
    """

    prompts: list[Prompt] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=20, gt=0)
    has_more: bool = False

    @model_validator(mode="before")
    @classmethod
    def derive_has_more(cls, data: Any) -> Any:
        """Compute has_more from the window when the caller does not supply it."""
        if isinstance(data, dict) and "has_more" not in data:
            prompts = data.get("prompts") or []
            data = {
                **data,
                "has_more": data.get("offset", 0) + len(prompts) < data.get("total", 0),
            }
        return data

    @model_validator(mode="after")
    def check_window(self) -> "SearchResult":
        """Ensure the page never exceeds its limit."""
        if len(self.prompts) > self.limit:
            raise ValueError(
                f"page holds {len(self.prompts)} prompts but limit is {self.limit}"
            )
        return self

    @classmethod
    def empty(cls, limit: int = 20, offset: int = 0) -> "SearchResult":
        """Result for a filter that matches nothing."""
        return cls(prompts=[], total=0, offset=offset, limit=limit)

    @property
    def ids(self) -> list[str]:
        """Prompt ids in result order."""
        return [prompt.id for prompt in self.prompts]
