from __future__ import annotations

"""
Submission payloads and views.

The intake payload is a tagged union on `type`: a movie requires `video_url`,
a series requires at least one episode and every episode requires
`video_url`. `SeriesData` is the structured form of the `series_data` JSON
column; `SeriesData.from_raw` never raises.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Literal, Optional, Union
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from app.core.exceptions import ValidationError
from app.schemas.enums import SeriesStatus, SubmissionStatus, SubmissionType

TITLE_MIN_LENGTH = 3
DESCRIPTION_MIN_LENGTH = 20


# ─────────────────────────────────────────────────────────────
# 🧩 Series metadata blob
# ─────────────────────────────────────────────────────────────
class SeriesData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_seasons: int = Field(1, ge=1, validation_alias=AliasChoices("total_seasons", "totalSeasons"))
    total_episodes: int = Field(0, ge=0, validation_alias=AliasChoices("total_episodes", "totalEpisodes"))
    status: SeriesStatus = SeriesStatus.ONGOING

    @classmethod
    def from_raw(cls, raw: Any) -> "SeriesData":
        """Parse a stored blob (dict or JSON text). Anything malformed yields the defaults."""
        if isinstance(raw, SeriesData):
            return raw
        if isinstance(raw, (str, bytes, bytearray)):
            try:
                raw = json.loads(raw)
            except ValueError:
                return cls()
        if not isinstance(raw, dict):
            return cls()
        try:
            return cls.model_validate(raw)
        except PydanticValidationError:
            return cls()


# ─────────────────────────────────────────────────────────────
# 📥 Intake payloads
# ─────────────────────────────────────────────────────────────
class EpisodeIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    season_number: int = Field(..., ge=1)
    episode_number: int = Field(..., ge=1)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    video_url: str = Field(..., min_length=1, max_length=2048)
    thumbnail_url: Optional[str] = Field(None, max_length=2048)
    duration_minutes: Optional[int] = Field(None, ge=0)
    file_size_gb: Decimal = Field(Decimal("0"), ge=0)


def _reject_duplicate_episodes(episodes: List[EpisodeIn]) -> List[EpisodeIn]:
    seen = set()
    for ep in episodes:
        key = (ep.season_number, ep.episode_number)
        if key in seen:
            raise ValueError(f"Duplicate episode S{key[0]}E{key[1]}")
        seen.add(key)
    return episodes


class _SubmissionBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=TITLE_MIN_LENGTH, max_length=255)
    description: str = Field(..., min_length=DESCRIPTION_MIN_LENGTH)
    genre: str = Field(..., min_length=1, max_length=64)
    year: Optional[int] = Field(None, ge=1888, le=2100)
    thumbnail_url: str = Field(..., min_length=1, max_length=2048)
    banner_url: Optional[str] = Field(None, max_length=2048)
    file_size_gb: Decimal = Field(Decimal("0"), ge=0)


class MovieSubmissionIn(_SubmissionBase):
    type: Literal["movie"] = "movie"
    video_url: str = Field(..., min_length=1, max_length=2048)


class SeriesSubmissionIn(_SubmissionBase):
    type: Literal["series"] = "series"
    series_data: Optional[SeriesData] = None
    episodes: List[EpisodeIn] = Field(..., min_length=1)

    @field_validator("series_data", mode="before")
    @classmethod
    def _coerce_series_data(cls, v: Any) -> Any:
        # a malformed blob falls back to defaults instead of failing intake
        return None if v is None else SeriesData.from_raw(v)

    @field_validator("episodes")
    @classmethod
    def _unique_episodes(cls, v: List[EpisodeIn]) -> List[EpisodeIn]:
        return _reject_duplicate_episodes(v)


SubmissionIn = Annotated[Union[MovieSubmissionIn, SeriesSubmissionIn], Field(discriminator="type")]

_submission_adapter: TypeAdapter = TypeAdapter(SubmissionIn)


class AddEpisodesIn(BaseModel):
    episodes: List[EpisodeIn] = Field(..., min_length=1)

    @field_validator("episodes")
    @classmethod
    def _unique_episodes(cls, v: List[EpisodeIn]) -> List[EpisodeIn]:
        return _reject_duplicate_episodes(v)


class SubmissionUpdateIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=TITLE_MIN_LENGTH, max_length=255)
    description: Optional[str] = Field(None, min_length=DESCRIPTION_MIN_LENGTH)
    genre: Optional[str] = Field(None, min_length=1, max_length=64)
    year: Optional[int] = Field(None, ge=1888, le=2100)

    @model_validator(mode="after")
    def _not_empty(self) -> "SubmissionUpdateIn":
        if not self.model_fields_set:
            raise ValueError("Provide at least one field to update")
        return self


class RejectSubmissionIn(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


# ─────────────────────────────────────────────────────────────
# 🔁 Parsing helpers (pydantic errors → ValidationError)
# ─────────────────────────────────────────────────────────────
def _as_validation_error(exc: PydanticValidationError) -> ValidationError:
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    summary = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}" for err in errors
    )
    return ValidationError(summary or "Validation failed", details=errors)


def parse_submission(payload: Any) -> Union[MovieSubmissionIn, SeriesSubmissionIn]:
    """Validate a raw payload (or pass through an already-parsed model)."""
    if isinstance(payload, (MovieSubmissionIn, SeriesSubmissionIn)):
        return payload
    try:
        return _submission_adapter.validate_python(payload)
    except PydanticValidationError as exc:
        raise _as_validation_error(exc) from exc


def parse_model(model: type[BaseModel], payload: Any) -> Any:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise _as_validation_error(exc) from exc


# ─────────────────────────────────────────────────────────────
# 📤 Views
# ─────────────────────────────────────────────────────────────
class SubmissionEpisodeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    season_number: int
    episode_number: int
    title: Optional[str] = None
    description: Optional[str] = None
    video_url: str
    thumbnail_url: Optional[str] = None
    duration_minutes: Optional[int] = None
    file_size_gb: Decimal


class SubmissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    creator_id: UUID
    type: SubmissionType
    title: str
    description: str
    genre: str
    year: Optional[int] = None
    thumbnail_url: str
    video_url: Optional[str] = None
    banner_url: Optional[str] = None
    series_data: Optional[SeriesData] = None
    file_size_gb: Decimal
    status: SubmissionStatus
    rejection_reason: Optional[str] = None
    published_movie_id: Optional[UUID] = None
    published_series_id: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime

    @field_validator("series_data", mode="before")
    @classmethod
    def _coerce_series_data(cls, v: Any) -> Any:
        return None if v is None else SeriesData.from_raw(v)


class SubmissionDetailOut(SubmissionOut):
    episodes: List[SubmissionEpisodeOut] = []


class PublishedRefOut(BaseModel):
    kind: SubmissionType
    id: UUID
    title: str
    slug: str
    total_seasons: Optional[int] = None
    total_episodes: Optional[int] = None


class SubmitResultOut(BaseModel):
    submission: SubmissionOut
    auto_approved: bool
    published: Optional[PublishedRefOut] = None


class AddEpisodesResultOut(BaseModel):
    submission_id: UUID
    added: int
    series_data: SeriesData
    file_size_gb: Decimal


class ModerationResultOut(BaseModel):
    submission: SubmissionOut
    published: Optional[PublishedRefOut] = None


__all__ = [
    "TITLE_MIN_LENGTH",
    "DESCRIPTION_MIN_LENGTH",
    "SeriesData",
    "EpisodeIn",
    "MovieSubmissionIn",
    "SeriesSubmissionIn",
    "SubmissionIn",
    "AddEpisodesIn",
    "SubmissionUpdateIn",
    "RejectSubmissionIn",
    "parse_submission",
    "parse_model",
    "SubmissionEpisodeOut",
    "SubmissionOut",
    "SubmissionDetailOut",
    "PublishedRefOut",
    "SubmitResultOut",
    "AddEpisodesResultOut",
    "ModerationResultOut",
]
