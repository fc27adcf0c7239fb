"""
Parsed payload identifiers, one frozen type per provider.

Each variant knows how to turn an ExecutionContext into its provider's read
request. Shared checks (timestamps, parameter decoding, downstream model
validation) happen in the helpers at the bottom of this module so every
variant reports failures the same way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional, Type, Union

from pydantic import ValidationError

from omh_runtime.application.errors import ErrorCode, ErrorKind
from omh_runtime.application.result import Failure, Result, Success
from omh_runtime.domain.common.parameters import KEY_CLIENT, MalformedParametersError, decode_parameters
from omh_runtime.domain.common.temporal import add_years, is_aware
from omh_runtime.domain.sub_requests.models import (
    URN_SPECIAL_ALL,
    BodyMediaReadRequest,
    GingerIoReadRequest,
    HealthVaultReadRequest,
    MindMyMedsReadRequest,
    RunKeeperReadRequest,
    StreamReadRequest,
    SubRequest,
    SurveyResponseReadRequest,
    TokenLocation,
)
from omh_runtime.settings import get_settings

if TYPE_CHECKING:
    from omh_runtime.application.execution_context import ExecutionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CampaignPayloadId:
    campaign_id: str
    survey_id: str
    prompt_id: Optional[str] = None

    kind: ClassVar[str] = "campaign"

    @property
    def root_id(self) -> str:
        return self.campaign_id

    @property
    def sub_id(self) -> Optional[str]:
        return self.survey_id

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        common = _common_fields(ctx)
        if isinstance(common, Failure):
            return common

        usernames = (ctx.owner,) if ctx.owner is not None else (URN_SPECIAL_ALL,)
        # A prompt-level ID narrows the read to that prompt's responses only
        if self.prompt_id is None:
            selection: Dict[str, Any] = {"survey_ids": (self.survey_id,)}
        else:
            selection = {"prompt_ids": (self.prompt_id,)}

        return _construct(
            SurveyResponseReadRequest,
            campaign_id=self.campaign_id,
            usernames=usernames,
            **selection,
            **common.value,
        )


@dataclass(frozen=True)
class ObserverPayloadId:
    observer_id: str
    stream_id: str

    kind: ClassVar[str] = "observer"

    @property
    def root_id(self) -> str:
        return self.observer_id

    @property
    def sub_id(self) -> Optional[str]:
        return self.stream_id

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        common = _common_fields(ctx)
        if isinstance(common, Failure):
            return common

        fields = dict(common.value)
        # Stream reads always accept a hashed password or a token from anywhere
        fields["hash_password"] = True
        fields["token_location"] = TokenLocation.EITHER
        return _construct(
            StreamReadRequest,
            observer_id=self.observer_id,
            stream_id=self.stream_id,
            stream_version=ctx.version,
            columns=ctx.columns,
            **fields,
        )


@dataclass(frozen=True)
class BodyMediaPayloadId:
    api: str

    kind: ClassVar[str] = "body_media"

    @property
    def root_id(self) -> str:
        return self.kind

    @property
    def sub_id(self) -> Optional[str]:
        return self.api

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        common = _common_fields(ctx)
        if isinstance(common, Failure):
            return common

        years = get_settings().body_media_max_range_years
        end_date = ctx.end_date if ctx.end_date is not None else datetime.now(timezone.utc)
        start_date = ctx.start_date
        if start_date is None:
            start_date = add_years(end_date, -years) + timedelta(days=1)

        if start_date > end_date:
            return Failure(
                ErrorKind.INVALID_TEMPORAL_RANGE,
                ErrorCode.OMH_INVALID_START_TIMESTAMP,
                "The start date is after the end date.",
                field="start_date",
            )
        # The end is exclusive, so its last covered day must fall on or
        # before start + N years - 1 day.
        last_day = end_date - timedelta(days=1)
        if last_day > add_years(start_date, years) - timedelta(days=1):
            return Failure(
                ErrorKind.INVALID_TEMPORAL_RANGE,
                ErrorCode.OMH_INVALID_END_TIMESTAMP,
                f"The range cannot exceed {_years_text(years)}.",
                field="end_date",
            )

        fields = dict(common.value)
        fields["start_date"] = start_date
        fields["end_date"] = end_date
        return _construct(BodyMediaReadRequest, api=self.api, **fields)


@dataclass(frozen=True)
class RunKeeperPayloadId:
    api: str

    kind: ClassVar[str] = "runkeeper"

    @property
    def root_id(self) -> str:
        return self.kind

    @property
    def sub_id(self) -> Optional[str]:
        return self.api

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        common = _common_fields(ctx)
        if isinstance(common, Failure):
            return common
        return _construct(RunKeeperReadRequest, api=self.api, **common.value)


@dataclass(frozen=True)
class HealthVaultPayloadId:
    # May be empty; only None is rejected when building
    thing_name: str

    kind: ClassVar[str] = "healthvault"

    @property
    def root_id(self) -> str:
        return self.kind

    @property
    def sub_id(self) -> Optional[str]:
        return self.thing_name

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        common = _common_fields(ctx)
        if isinstance(common, Failure):
            return common
        return _construct(HealthVaultReadRequest, thing_name=self.thing_name, **common.value)


@dataclass(frozen=True)
class GingerIoPayloadId:
    kind: ClassVar[str] = "ginger_io"

    @property
    def root_id(self) -> str:
        return self.kind

    @property
    def sub_id(self) -> Optional[str]:
        return None

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        common = _common_fields(ctx)
        if isinstance(common, Failure):
            return common
        return _construct(GingerIoReadRequest, **common.value)


@dataclass(frozen=True)
class MindMyMedsPayloadId:
    kind: ClassVar[str] = "mind_my_meds"

    @property
    def root_id(self) -> str:
        return self.kind

    @property
    def sub_id(self) -> Optional[str]:
        return None

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        common = _common_fields(ctx)
        if isinstance(common, Failure):
            return common
        return _construct(MindMyMedsReadRequest, **common.value)


@dataclass(frozen=True)
class EntraPayloadId:
    method: str

    kind: ClassVar[str] = "entra"

    @property
    def root_id(self) -> str:
        return self.kind

    @property
    def sub_id(self) -> Optional[str]:
        return self.method

    def to_sub_request(self, ctx: "ExecutionContext") -> Result[Optional[SubRequest]]:
        # TODO: build an Entra read request once the provider integration is confirmed;
        # until then no sub-request is produced and callers treat None as "nothing to run".
        return Success(None)


PayloadIdentifier = Union[
    CampaignPayloadId,
    ObserverPayloadId,
    BodyMediaPayloadId,
    RunKeeperPayloadId,
    HealthVaultPayloadId,
    GingerIoPayloadId,
    MindMyMedsPayloadId,
    EntraPayloadId,
]


def _years_text(years: int) -> str:
    return "one year" if years == 1 else f"{years} years"


def _common_fields(ctx: "ExecutionContext") -> Result[Dict[str, Any]]:
    if not is_aware(ctx.start_date):
        return Failure(
            ErrorKind.INVALID_TEMPORAL_RANGE,
            ErrorCode.OMH_INVALID_START_TIMESTAMP,
            "The start date must include a time zone.",
            field="start_date",
        )
    if not is_aware(ctx.end_date):
        return Failure(
            ErrorKind.INVALID_TEMPORAL_RANGE,
            ErrorCode.OMH_INVALID_END_TIMESTAMP,
            "The end date must include a time zone.",
            field="end_date",
        )
    if ctx.start_date is not None and ctx.end_date is not None and ctx.start_date > ctx.end_date:
        return Failure(
            ErrorKind.INVALID_TEMPORAL_RANGE,
            ErrorCode.OMH_INVALID_START_TIMESTAMP,
            "The start date is after the end date.",
            field="start_date",
        )

    try:
        decoded = decode_parameters(ctx.parameters)
    except MalformedParametersError as e:
        logger.warning(f"Could not decode request parameters: {e}")
        return Failure(
            ErrorKind.PARAMETER_DECODE_FAILURE,
            ErrorCode.SYSTEM_GENERAL_ERROR,
            "There was an error reading the parameters.",
            cause=e,
        )

    return Success(
        {
            "client": ctx.client if ctx.client is not None else decoded.get(KEY_CLIENT),
            "hash_password": ctx.hash_password,
            "token_location": ctx.token_location,
            "parameters": decoded,
            "owner": ctx.owner,
            "start_date": ctx.start_date,
            "end_date": ctx.end_date,
            "num_to_skip": ctx.num_to_skip,
            "num_to_return": ctx.num_to_return,
        }
    )


def _construct(model: Type[SubRequest], **fields: Any) -> Result[Optional[SubRequest]]:
    try:
        return Success(model(**fields))
    except ValidationError as e:
        logger.warning(f"Rejected {model.__name__}: {e.error_count()} validation error(s)")
        return Failure(
            ErrorKind.SUB_REQUEST_CONSTRUCTION_FAILURE,
            ErrorCode.SYSTEM_GENERAL_ERROR,
            "There was an error building the request.",
            cause=e,
        )
