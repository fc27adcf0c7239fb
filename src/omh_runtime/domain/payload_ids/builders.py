from __future__ import annotations

from typing import Optional, Sequence

from omh_runtime.application.errors import ErrorCode
from omh_runtime.application.result import Result, Success, malformed, missing
from omh_runtime.domain.common.ids import DEFAULT_SEPARATOR, is_blank, join_remainder
from omh_runtime.domain.payload_ids.models import (
    BodyMediaPayloadId,
    CampaignPayloadId,
    EntraPayloadId,
    GingerIoPayloadId,
    HealthVaultPayloadId,
    MindMyMedsPayloadId,
    ObserverPayloadId,
    PayloadIdentifier,
    RunKeeperPayloadId,
)

CAMPAIGN_MIN_PARTS = 7
CAMPAIGN_ID_START = 3
SURVEY_ID_MARKER = "survey_id"
PROMPT_ID_MARKER = "prompt_id"
CAMPAIGN_FORMAT = "omh:ohmage:campaign:<campaign_id>:survey_id:<survey_id>[:prompt_id:<prompt_id>]"

OBSERVER_PARTS = 5

# Third-party tokens start right after the provider domain
PROVIDER_TOKEN_START = 2


def build_campaign(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    """
    Build a campaign payload ID.

    The campaign URN may itself contain the separator, so it is everything
    between the ``campaign`` token and the ``survey_id`` marker.
    """
    if len(parts) < CAMPAIGN_MIN_PARTS:
        return malformed("The payload ID is too short for a 'campaign'-based payload ID.")

    prompt_id: Optional[str] = None
    marker = parts[-2]
    if marker == SURVEY_ID_MARKER:
        survey_id = parts[-1]
        survey_index = len(parts) - 2
    elif marker == PROMPT_ID_MARKER:
        survey_id = parts[-3]
        prompt_id = parts[-1]
        survey_index = len(parts) - 4
        if parts[survey_index] != SURVEY_ID_MARKER:
            return malformed(f"The 'campaign'-based payload ID is incorrectly formatted. It must be of the form: {CAMPAIGN_FORMAT}")
    else:
        return malformed(f"The 'campaign'-based payload ID is incorrectly formatted. It must be of the form: {CAMPAIGN_FORMAT}")

    campaign_id = separator.join(parts[CAMPAIGN_ID_START:survey_index])
    if is_blank(campaign_id):
        return missing("campaign_id", ErrorCode.CAMPAIGN_INVALID_ID, "The campaign ID is missing or only whitespace.")
    if is_blank(survey_id):
        return missing("survey_id", ErrorCode.SURVEY_INVALID_SURVEY_ID, "The survey ID is missing or only whitespace.")
    if prompt_id is not None and is_blank(prompt_id):
        return missing("prompt_id", ErrorCode.SURVEY_INVALID_PROMPT_ID, "The prompt ID is only whitespace.")

    return Success(CampaignPayloadId(campaign_id=campaign_id, survey_id=survey_id, prompt_id=prompt_id))


def build_observer(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    if len(parts) > OBSERVER_PARTS:
        return malformed("The payload ID is too long for an 'observer'-based payload ID.")

    observer_id = parts[3] if len(parts) > 3 else None
    stream_id = parts[4] if len(parts) > 4 else None
    if is_blank(observer_id):
        return missing("observer_id", ErrorCode.OBSERVER_INVALID_ID, "The observer ID is null or only whitespace.")
    if is_blank(stream_id):
        return missing("stream_id", ErrorCode.OBSERVER_INVALID_STREAM_ID, "The stream ID is null or only whitespace.")

    return Success(ObserverPayloadId(observer_id=observer_id, stream_id=stream_id))


def build_body_media(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    api = join_remainder(parts, PROVIDER_TOKEN_START, separator)
    if is_blank(api):
        return missing("api", ErrorCode.OMH_INVALID_PAYLOAD_ID, "The BodyMedia API is null or only whitespace.")
    return Success(BodyMediaPayloadId(api=api))


def build_runkeeper(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    api = join_remainder(parts, PROVIDER_TOKEN_START, separator)
    if is_blank(api):
        return missing("api", ErrorCode.OMH_INVALID_PAYLOAD_ID, "The RunKeeper API is null or only whitespace.")
    return Success(RunKeeperPayloadId(api=api))


def build_healthvault(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    # Only a missing thing name is rejected; an empty one is passed through
    thing_name = join_remainder(parts, PROVIDER_TOKEN_START, separator)
    if thing_name is None:
        return missing("thing_name", ErrorCode.OMH_INVALID_PAYLOAD_ID, "The HealthVault thing name is null.")
    return Success(HealthVaultPayloadId(thing_name=thing_name))


def build_ginger_io(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    return Success(GingerIoPayloadId())


def build_mind_my_meds(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    return Success(MindMyMedsPayloadId())


def build_entra(parts: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Result[PayloadIdentifier]:
    method = join_remainder(parts, PROVIDER_TOKEN_START, separator)
    if method is None:
        return missing("method", ErrorCode.OMH_INVALID_PAYLOAD_ID, "The Entra method is null.")
    return Success(EntraPayloadId(method=method))
