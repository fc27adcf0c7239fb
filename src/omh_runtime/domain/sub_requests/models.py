"""Provider read requests handed to the execution layer."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from omh_runtime.domain.common.columns import ColumnNode
from omh_runtime.domain.common.temporal import add_years
from omh_runtime.settings import MAX_NUM_TO_RETURN_LIMIT

# Usernames value meaning "every user the requester may see"
URN_SPECIAL_ALL = "urn:ohmage:special:all"

STREAM_MAX_NUMBER_TO_RETURN = MAX_NUM_TO_RETURN_LIMIT

BODY_MEDIA_APIS = frozenset({"sleep"})
RUNKEEPER_APIS = frozenset({"profile", "fitnessActivities"})
HEALTHVAULT_THINGS = frozenset({"medication", "condition", "emergency_or_provider_contact"})


class TokenLocation(str, Enum):
    COOKIE = "COOKIE"
    PARAMETER = "PARAMETER"
    EITHER = "EITHER"


class SubRequest(BaseModel):
    """Fields shared by every provider read request."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    provider: ClassVar[str] = ""

    client: str = Field(..., min_length=1)
    # None means username/password authentication is not allowed
    hash_password: Optional[bool] = None
    # None means token authentication is not allowed
    token_location: Optional[TokenLocation] = None
    parameters: Dict[str, str] = Field(default_factory=dict)
    owner: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    num_to_skip: int = Field(0, ge=0)
    num_to_return: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_authentication(self) -> "SubRequest":
        if self.hash_password is None and self.token_location is None:
            raise ValueError("Neither a password nor a token is allowed, so the request cannot authenticate.")
        return self


class SurveyResponseReadRequest(SubRequest):
    provider: ClassVar[str] = "campaign"

    campaign_id: str = Field(..., min_length=1)
    usernames: Tuple[str, ...] = (URN_SPECIAL_ALL,)
    survey_ids: Optional[Tuple[str, ...]] = None
    prompt_ids: Optional[Tuple[str, ...]] = None

    @model_validator(mode="after")
    def check_survey_or_prompt(self) -> "SurveyResponseReadRequest":
        if (self.survey_ids is None) == (self.prompt_ids is None):
            raise ValueError("Exactly one of survey IDs or prompt IDs must be given.")
        return self


class StreamReadRequest(SubRequest):
    provider: ClassVar[str] = "observer"

    observer_id: str = Field(..., min_length=1)
    stream_id: str = Field(..., min_length=1)
    stream_version: Optional[int] = Field(None, ge=0)
    columns: ColumnNode = Field(default_factory=ColumnNode)
    num_to_return: int = Field(..., ge=0, le=STREAM_MAX_NUMBER_TO_RETURN)


class BodyMediaReadRequest(SubRequest):
    provider: ClassVar[str] = "body_media"

    api: str

    @model_validator(mode="before")
    @classmethod
    def default_window(cls, data: Any) -> Any:
        # BodyMedia answers at most one year, ending now unless told otherwise
        if isinstance(data, dict):
            data = dict(data)
            end = data.get("end_date") or datetime.now(timezone.utc)
            data["end_date"] = end
            if data.get("start_date") is None:
                data["start_date"] = add_years(end, -1) + timedelta(days=1)
        return data

    @model_validator(mode="after")
    def check_window(self) -> "BodyMediaReadRequest":
        if self.start_date > self.end_date:
            raise ValueError("The start date is after the end date.")
        return self

    @field_validator("api")
    @classmethod
    def known_api(cls, value: str) -> str:
        if value not in BODY_MEDIA_APIS:
            raise ValueError(f"The path is unknown: {value}")
        return value


class RunKeeperReadRequest(SubRequest):
    provider: ClassVar[str] = "runkeeper"

    api: str

    @field_validator("api")
    @classmethod
    def known_api(cls, value: str) -> str:
        if value not in RUNKEEPER_APIS:
            raise ValueError(f"The API is unknown: {value}")
        return value


class HealthVaultReadRequest(SubRequest):
    provider: ClassVar[str] = "healthvault"

    thing_name: str

    @field_validator("thing_name")
    @classmethod
    def known_thing(cls, value: str) -> str:
        if value not in HEALTHVAULT_THINGS:
            raise ValueError(f"The thing is unknown: {value}")
        return value


class GingerIoReadRequest(SubRequest):
    provider: ClassVar[str] = "ginger_io"


class MindMyMedsReadRequest(SubRequest):
    provider: ClassVar[str] = "mind_my_meds"
