"""Router for OMH payload ID endpoints."""

from __future__ import annotations

import dataclasses
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from omh_runtime.app.api.models.payloads import (
    ErrorDetail,
    ErrorResponse,
    PayloadIdentifierResponse,
    ReadPlanResponse,
)
from omh_runtime.application.dispatcher import Dispatcher, get_dispatcher
from omh_runtime.application.errors import ErrorCode, ErrorKind
from omh_runtime.application.execution_context import ExecutionContext
from omh_runtime.application.result import Failure
from omh_runtime.domain.common.columns import ColumnListError, ColumnNode
from omh_runtime.domain.common.ids import is_blank
from omh_runtime.domain.common.temporal import parse_timestamp
from omh_runtime.domain.sub_requests.models import SubRequest, TokenLocation
from omh_runtime.settings import MAX_NUM_TO_RETURN_LIMIT

router = APIRouter()

# Read parameters that may appear at most once, with the code reported when repeated
SINGLE_VALUED_QUERY_PARAMS = {
    "payload_id": ErrorCode.OMH_INVALID_PAYLOAD_ID,
    "payload_version": ErrorCode.OMH_INVALID_PAYLOAD_VERSION,
    "requester": ErrorCode.OMH_INVALID_REQUESTER,
    "owner": ErrorCode.OMH_INVALID_OWNER,
    "t_start": ErrorCode.OMH_INVALID_START_TIMESTAMP,
    "t_end": ErrorCode.OMH_INVALID_END_TIMESTAMP,
    "column_list": ErrorCode.OMH_INVALID_COLUMN_LIST,
    "num_to_skip": ErrorCode.OMH_INVALID_NUM_TO_SKIP,
    "num_to_return": ErrorCode.OMH_INVALID_NUM_TO_RETURN,
}


def get_payload_dispatcher() -> Dispatcher:
    """Dependency to provide the process-wide Dispatcher."""
    return get_dispatcher()


def failure_response(failure: Failure, status_code: int = 400) -> JSONResponse:
    """Translate a dispatch failure into the client-facing error envelope."""
    body = ErrorResponse(
        error=ErrorDetail(
            code=failure.code.value,
            kind=failure.kind.value,
            message=failure.message,
            field=failure.field,
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _input_failure(code: ErrorCode, message: str, field: str) -> Failure:
    return Failure(ErrorKind.PARAMETER_DECODE_FAILURE, code, message, field=field)


def _repeated_value(request: Request) -> Failure | None:
    for key, code in SINGLE_VALUED_QUERY_PARAMS.items():
        if len(request.query_params.getlist(key)) > 1:
            return _input_failure(code, f"Multiple values were given: {key}", key)
    return None


def _parse_count(value: str | None, code: ErrorCode, field: str, upper: int | None = None) -> int | Failure | None:
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        return _input_failure(code, f"The value is not a number: {value}", field)
    if number < 0 or (upper is not None and number > upper):
        bound = f"between 0 and {upper}" if upper is not None else "zero or more"
        return _input_failure(code, f"The value must be {bound}: {value}", field)
    return number


def _sub_request_body(sub_request: SubRequest) -> dict[str, Any]:
    # Raw parameters can carry credentials, so they are never echoed back
    body = sub_request.model_dump(mode="json", exclude={"parameters", "columns"})
    columns = getattr(sub_request, "columns", None)
    if columns is not None:
        body["columns"] = columns.to_list()
    return body


@router.get("/payloads/resolve", response_model=PayloadIdentifierResponse)
def resolve_payload_id(
    payload_id: str,
    dispatcher: Dispatcher = Depends(get_payload_dispatcher),
) -> Any:
    """Resolve a payload ID into its provider-specific identifier."""
    result = dispatcher.resolve(payload_id)
    if isinstance(result, Failure):
        return failure_response(result)

    identifier = result.value
    return PayloadIdentifierResponse(
        payload_id=payload_id,
        kind=identifier.kind,
        root_id=identifier.root_id,
        sub_id=identifier.sub_id,
        details=dataclasses.asdict(identifier),
    )


@router.get("/payloads/read-plan", response_model=ReadPlanResponse)
def plan_read(
    request: Request,
    payload_id: str | None = None,
    payload_version: str | None = None,
    requester: str | None = None,
    owner: str | None = None,
    t_start: str | None = None,
    t_end: str | None = None,
    column_list: str | None = None,
    num_to_skip: str | None = None,
    num_to_return: str | None = None,
    dispatcher: Dispatcher = Depends(get_payload_dispatcher),
) -> Any:
    """
    Build, but do not execute, the read request for an OMH read.

    Query parameters follow the OMH read call and are checked in its order:
    requester, payload ID, payload version, owner, time window, columns and
    paging. The remaining query string is handed to the sub-request as its
    raw parameter map.
    """
    repeated = _repeated_value(request)
    if repeated is not None:
        return failure_response(repeated)

    if not requester:
        return failure_response(_input_failure(ErrorCode.OMH_INVALID_REQUESTER, "No requester value was given.", "requester"))

    resolved = dispatcher.resolve(payload_id)
    if isinstance(resolved, Failure):
        return failure_response(resolved)
    identifier = resolved.value

    if is_blank(payload_version):
        return failure_response(
            _input_failure(ErrorCode.OMH_INVALID_PAYLOAD_VERSION, "The payload version is unknown.", "payload_version")
        )
    version = _parse_count(payload_version, ErrorCode.OMH_INVALID_PAYLOAD_VERSION, "payload_version")
    if isinstance(version, Failure):
        return failure_response(version)

    if owner is not None and is_blank(owner):
        return failure_response(_input_failure(ErrorCode.OMH_INVALID_OWNER, "The owner is only whitespace.", "owner"))

    try:
        start_date = parse_timestamp(t_start)
    except ValueError:
        return failure_response(_input_failure(ErrorCode.OMH_INVALID_START_TIMESTAMP, f"The start time is invalid: {t_start}", "t_start"))
    try:
        end_date = parse_timestamp(t_end)
    except ValueError:
        return failure_response(_input_failure(ErrorCode.OMH_INVALID_END_TIMESTAMP, f"The end time is invalid: {t_end}", "t_end"))
    try:
        columns = ColumnNode.parse(column_list)
    except ColumnListError as e:
        return failure_response(_input_failure(ErrorCode.OMH_INVALID_COLUMN_LIST, str(e), "column_list"))

    skip = _parse_count(num_to_skip, ErrorCode.OMH_INVALID_NUM_TO_SKIP, "num_to_skip")
    if isinstance(skip, Failure):
        return failure_response(skip)
    limit = _parse_count(num_to_return, ErrorCode.OMH_INVALID_NUM_TO_RETURN, "num_to_return", MAX_NUM_TO_RETURN_LIMIT)
    if isinstance(limit, Failure):
        return failure_response(limit)

    parameters = {key: request.query_params.getlist(key) for key in request.query_params.keys()}
    ctx = ExecutionContext.from_args(
        parameters=parameters,
        hash_password=True,
        token_location=TokenLocation.EITHER,
        client=requester,
        version=version,
        owner=owner,
        start_date=start_date,
        end_date=end_date,
        num_to_skip=skip or 0,
        num_to_return=limit,
        columns=columns,
    )

    result = dispatcher.build(identifier, ctx)
    if isinstance(result, Failure):
        return failure_response(result)

    sub_request = result.value
    return ReadPlanResponse(
        payload_id=payload_id,
        kind=identifier.kind,
        provider=sub_request.provider if sub_request is not None else None,
        sub_request=_sub_request_body(sub_request) if sub_request is not None else None,
    )
