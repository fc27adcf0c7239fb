from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from omh_runtime.application.result import Failure


class ErrorKind(str, Enum):
    MALFORMED_PAYLOAD_ID = "MalformedPayloadId"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INVALID_TEMPORAL_RANGE = "InvalidTemporalRange"
    PARAMETER_DECODE_FAILURE = "ParameterDecodeFailure"
    SUB_REQUEST_CONSTRUCTION_FAILURE = "SubRequestConstructionFailure"


class ErrorCode(str, Enum):
    """Client-facing error codes shared with the rest of the ohmage server."""

    SYSTEM_GENERAL_ERROR = "0100"
    SERVER_INVALID_CLIENT = "0301"
    SURVEY_INVALID_SURVEY_ID = "0603"
    SURVEY_INVALID_PROMPT_ID = "0604"
    CAMPAIGN_INVALID_ID = "0700"
    OBSERVER_INVALID_ID = "1502"
    OBSERVER_INVALID_STREAM_ID = "1507"
    OBSERVER_INVALID_COLUMN_LIST = "1514"
    OMH_INVALID_PAYLOAD_ID = "1700"
    OMH_INVALID_START_TIMESTAMP = "1701"
    OMH_INVALID_END_TIMESTAMP = "1702"
    OMH_INVALID_COLUMN_LIST = "1703"
    OMH_INVALID_NUM_TO_SKIP = "1705"
    OMH_INVALID_NUM_TO_RETURN = "1706"
    OMH_INVALID_REQUESTER = "1707"
    OMH_INVALID_PAYLOAD_VERSION = "1708"
    OMH_INVALID_OWNER = "1709"


class DispatchError(Exception):
    """Raised when a failed dispatch result is unwrapped."""

    def __init__(self, failure: "Failure") -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def code(self) -> ErrorCode:
        return self.failure.code

    @property
    def field(self) -> str | None:
        return self.failure.field


class InvalidPayloadIdError(DispatchError):
    pass


class MissingRequiredFieldError(DispatchError):
    pass


class InvalidTemporalRangeError(DispatchError):
    pass


class ParameterDecodeError(DispatchError):
    pass


class SubRequestConstructionError(DispatchError):
    pass


ERROR_TYPES: dict[ErrorKind, type[DispatchError]] = {
    ErrorKind.MALFORMED_PAYLOAD_ID: InvalidPayloadIdError,
    ErrorKind.MISSING_REQUIRED_FIELD: MissingRequiredFieldError,
    ErrorKind.INVALID_TEMPORAL_RANGE: InvalidTemporalRangeError,
    ErrorKind.PARAMETER_DECODE_FAILURE: ParameterDecodeError,
    ErrorKind.SUB_REQUEST_CONSTRUCTION_FAILURE: SubRequestConstructionError,
}
