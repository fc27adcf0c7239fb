"""Unit tests for building provider read requests from payload identifiers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from omh_runtime.application.errors import (
    ErrorCode,
    ErrorKind,
    InvalidTemporalRangeError,
    ParameterDecodeError,
    SubRequestConstructionError,
)
from omh_runtime.application.execution_context import ExecutionContext
from omh_runtime.application.result import Failure, Success
from omh_runtime.domain.common.columns import ColumnNode
from omh_runtime.domain.common.parameters import MalformedParametersError
from omh_runtime.domain.payload_ids.models import (
    BodyMediaPayloadId,
    CampaignPayloadId,
    EntraPayloadId,
    GingerIoPayloadId,
    HealthVaultPayloadId,
    MindMyMedsPayloadId,
    ObserverPayloadId,
    RunKeeperPayloadId,
)
from omh_runtime.domain.sub_requests.models import (
    URN_SPECIAL_ALL,
    BodyMediaReadRequest,
    GingerIoReadRequest,
    HealthVaultReadRequest,
    MindMyMedsReadRequest,
    RunKeeperReadRequest,
    StreamReadRequest,
    SurveyResponseReadRequest,
    TokenLocation,
)

UTC = timezone.utc


def make_ctx(**overrides):
    args = {"parameters": {"requester": ["tester"], "auth_token": ["tok"]}, "client": "tester"}
    args.update(overrides)
    return ExecutionContext.from_args(**args)


class TestBodyMediaRange:
    def test_exactly_one_year_is_accepted(self):
        """Test the boundary: 2020-01-01 to 2021-01-01 is within the one year ceiling."""
        ctx = make_ctx(start_date=datetime(2020, 1, 1, tzinfo=UTC), end_date=datetime(2021, 1, 1, tzinfo=UTC))
        result = BodyMediaPayloadId("sleep").to_sub_request(ctx)
        assert isinstance(result, Success)
        assert isinstance(result.value, BodyMediaReadRequest)
        assert result.value.start_date == datetime(2020, 1, 1, tzinfo=UTC)
        assert result.value.end_date == datetime(2021, 1, 1, tzinfo=UTC)

    def test_one_day_over_is_rejected(self):
        """Test that one day past the ceiling fails with the end timestamp code."""
        ctx = make_ctx(start_date=datetime(2020, 1, 1, tzinfo=UTC), end_date=datetime(2021, 1, 2, tzinfo=UTC))
        result = BodyMediaPayloadId("sleep").to_sub_request(ctx)
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.INVALID_TEMPORAL_RANGE
        assert result.code == ErrorCode.OMH_INVALID_END_TIMESTAMP
        assert "one year" in result.message
        with pytest.raises(InvalidTemporalRangeError):
            result.unwrap()

    def test_open_range_gets_default_window(self):
        """Test that a missing start defaults to one year before the end plus a day."""
        end = datetime(2021, 6, 15, tzinfo=UTC)
        result = BodyMediaPayloadId("sleep").to_sub_request(make_ctx(end_date=end))
        assert result.value.start_date == datetime(2020, 6, 16, tzinfo=UTC)

    def test_missing_end_defaults_to_now(self):
        """Test that a missing end date becomes the current time."""
        before = datetime.now(UTC)
        result = BodyMediaPayloadId("sleep").to_sub_request(make_ctx())
        assert result.value.end_date >= before

    def test_start_only_in_the_future_is_rejected(self):
        """Test that a future start with no end cannot run past the default end of now."""
        start = datetime.now(UTC) + timedelta(days=30)
        result = BodyMediaPayloadId("sleep").to_sub_request(make_ctx(start_date=start))
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.INVALID_TEMPORAL_RANGE
        assert result.code == ErrorCode.OMH_INVALID_START_TIMESTAMP

    def test_start_only_long_ago_is_rejected(self):
        """Test that an old start with no end still respects the one year ceiling."""
        start = datetime.now(UTC) - timedelta(days=800)
        result = BodyMediaPayloadId("sleep").to_sub_request(make_ctx(start_date=start))
        assert isinstance(result, Failure)
        assert result.code == ErrorCode.OMH_INVALID_END_TIMESTAMP

    def test_start_only_recent_is_accepted(self):
        """Test that a recent start with no end runs until now."""
        start = datetime.now(UTC) - timedelta(days=30)
        result = BodyMediaPayloadId("sleep").to_sub_request(make_ctx(start_date=start))
        assert isinstance(result, Success)
        assert result.value.start_date == start
        assert result.value.end_date > start

    def test_request_rejects_inverted_window(self):
        """Test that the BodyMedia request itself refuses start after end."""
        with pytest.raises(ValidationError):
            BodyMediaReadRequest(
                client="tester",
                hash_password=True,
                num_to_return=10,
                api="sleep",
                start_date=datetime(2021, 2, 1, tzinfo=UTC),
                end_date=datetime(2021, 1, 1, tzinfo=UTC),
            )

    def test_unknown_api_fails_construction(self):
        """Test that the BodyMedia request rejects unknown APIs."""
        result = BodyMediaPayloadId("steps").to_sub_request(make_ctx())
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.SUB_REQUEST_CONSTRUCTION_FAILURE
        assert isinstance(result.cause, ValidationError)


def test_other_providers_accept_long_ranges():
    """Test that only BodyMedia caps the time window."""
    ctx = make_ctx(start_date=datetime(2010, 1, 1, tzinfo=UTC), end_date=datetime(2020, 1, 1, tzinfo=UTC))
    assert isinstance(RunKeeperPayloadId("profile").to_sub_request(ctx), Success)
    assert isinstance(ObserverPayloadId("obs", "stream").to_sub_request(ctx), Success)


def test_start_after_end_is_rejected():
    """Test that start must not be after end for any provider."""
    ctx = make_ctx(start_date=datetime(2021, 1, 2, tzinfo=UTC), end_date=datetime(2021, 1, 1, tzinfo=UTC))
    result = GingerIoPayloadId().to_sub_request(ctx)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.INVALID_TEMPORAL_RANGE
    assert result.code == ErrorCode.OMH_INVALID_START_TIMESTAMP


def test_naive_timestamp_is_rejected():
    """Test that timestamps without a time zone are refused."""
    result = MindMyMedsPayloadId().to_sub_request(make_ctx(end_date=datetime(2021, 1, 1)))
    assert isinstance(result, Failure)
    assert result.field == "end_date"


def test_campaign_survey_request():
    """Test the survey-level campaign request."""
    result = CampaignPayloadId("urn:c", "morning").to_sub_request(make_ctx())
    request = result.value
    assert isinstance(request, SurveyResponseReadRequest)
    assert request.campaign_id == "urn:c"
    assert request.survey_ids == ("morning",)
    assert request.prompt_ids is None
    assert request.usernames == (URN_SPECIAL_ALL,)


def test_campaign_prompt_request_with_owner():
    """Test that prompt IDs and owners narrow the request."""
    result = CampaignPayloadId("urn:c", "morning", "mood").to_sub_request(make_ctx(owner="alice"))
    request = result.value
    assert request.prompt_ids == ("mood",)
    assert request.survey_ids is None
    assert request.usernames == ("alice",)


def test_observer_request_fields():
    """Test that the stream request carries version, columns and forced auth settings."""
    columns = ColumnNode.parse("data:sleep")
    ctx = make_ctx(version=3, columns=columns, hash_password=None, token_location=TokenLocation.COOKIE)
    request = ObserverPayloadId("obs", "stream").to_sub_request(ctx).value
    assert isinstance(request, StreamReadRequest)
    assert request.stream_version == 3
    assert request.columns == columns
    assert request.hash_password is True
    assert request.token_location == TokenLocation.EITHER


def test_observer_num_to_return_cap():
    """Test that the stream request enforces its page size limit."""
    result = ObserverPayloadId("obs", "stream").to_sub_request(make_ctx(num_to_return=5000))
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.SUB_REQUEST_CONSTRUCTION_FAILURE


def test_runkeeper_and_healthvault_requests():
    """Test that known APIs and things build their requests."""
    assert isinstance(RunKeeperPayloadId("fitnessActivities").to_sub_request(make_ctx()).value, RunKeeperReadRequest)
    assert isinstance(HealthVaultPayloadId("medication").to_sub_request(make_ctx()).value, HealthVaultReadRequest)
    assert isinstance(GingerIoPayloadId().to_sub_request(make_ctx()).value, GingerIoReadRequest)
    assert isinstance(MindMyMedsPayloadId().to_sub_request(make_ctx()).value, MindMyMedsReadRequest)


def test_healthvault_empty_thing_fails_downstream():
    """Test that the accepted empty thing name is refused by the request itself."""
    result = HealthVaultPayloadId("").to_sub_request(make_ctx())
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.SUB_REQUEST_CONSTRUCTION_FAILURE


def test_no_authentication_allowed_fails_construction():
    """Test that disallowing both password and token is an invalid combination."""
    result = RunKeeperPayloadId("profile").to_sub_request(make_ctx(hash_password=None, token_location=None))
    assert isinstance(result, Failure)
    assert result.message == "There was an error building the request."
    with pytest.raises(SubRequestConstructionError) as excinfo:
        result.unwrap()
    assert isinstance(excinfo.value.__cause__, ValidationError)


def test_negative_skip_fails_construction():
    """Test that pagination is validated by the request."""
    result = GingerIoPayloadId().to_sub_request(make_ctx(num_to_skip=-1))
    assert result.kind == ErrorKind.SUB_REQUEST_CONSTRUCTION_FAILURE


def test_missing_client_fails_construction():
    """Test that a client is required."""
    result = GingerIoPayloadId().to_sub_request(ExecutionContext.from_args(parameters={}))
    assert result.kind == ErrorKind.SUB_REQUEST_CONSTRUCTION_FAILURE


def test_client_falls_back_to_requester_parameter():
    """Test that the requester parameter supplies the client."""
    result = GingerIoPayloadId().to_sub_request(ExecutionContext.from_args(parameters={"requester": ["app"]}))
    assert result.value.client == "app"


@pytest.mark.parametrize(
    "parameters",
    [
        {"auth_token": ["a", "b"]},
        {"client": "not-a-list"},
        {"client": [1]},
        {1: ["x"]},
    ],
)
def test_malformed_parameters_fail_decoding(parameters):
    """Test that undecodable parameter maps are reported as decode failures."""
    result = RunKeeperPayloadId("profile").to_sub_request(make_ctx(parameters=parameters))
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.PARAMETER_DECODE_FAILURE
    assert result.message == "There was an error reading the parameters."
    assert isinstance(result.cause, MalformedParametersError)
    with pytest.raises(ParameterDecodeError):
        result.unwrap()


@pytest.mark.parametrize(
    "ctx",
    [
        make_ctx(),
        make_ctx(hash_password=None, token_location=None),
        make_ctx(start_date=datetime(2020, 1, 1, tzinfo=UTC), end_date=datetime(2030, 1, 1, tzinfo=UTC)),
        make_ctx(num_to_skip=10, num_to_return=0, owner="alice"),
    ],
)
def test_entra_never_builds_a_sub_request(ctx):
    """Test that Entra returns an empty result for any well-formed context."""
    assert EntraPayloadId("getGlucose").to_sub_request(ctx) == Success(None)


def test_sub_requests_are_frozen():
    """Test that built requests cannot be modified."""
    request = GingerIoPayloadId().to_sub_request(make_ctx()).value
    with pytest.raises(ValidationError):
        request.client = "other"


def test_parameters_are_decoded_onto_the_request():
    """Test that single values are passed to the request."""
    request = GingerIoPayloadId().to_sub_request(make_ctx()).value
    assert request.parameters == {"requester": "tester", "auth_token": "tok", "client": "tester"}


def test_leap_day_start():
    """Test the ceiling for a range starting on Feb 29."""
    start = datetime(2020, 2, 29, tzinfo=UTC)
    ok = make_ctx(start_date=start, end_date=datetime(2021, 2, 28, tzinfo=UTC))
    over = make_ctx(start_date=start, end_date=datetime(2021, 2, 28, tzinfo=UTC) + timedelta(days=1))
    assert isinstance(BodyMediaPayloadId("sleep").to_sub_request(ok), Success)
    assert isinstance(BodyMediaPayloadId("sleep").to_sub_request(over), Failure)
