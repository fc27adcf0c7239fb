from __future__ import annotations

import os
from dataclasses import dataclass

# No read may ask for a larger page than this, whatever the configuration says
MAX_NUM_TO_RETURN_LIMIT = 2000

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] omh %(name)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """Runtime settings sourced from environment variables."""

    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT
    payload_id_separator: str = ":"
    # Default page size for reads that do not ask for one
    max_num_to_return: int = MAX_NUM_TO_RETURN_LIMIT
    body_media_max_range_years: int = 1

    def __post_init__(self) -> None:
        if not 0 <= self.max_num_to_return <= MAX_NUM_TO_RETURN_LIMIT:
            raise ValueError(
                f"OMH_MAX_NUM_TO_RETURN must be between 0 and {MAX_NUM_TO_RETURN_LIMIT}: {self.max_num_to_return}"
            )
        if self.body_media_max_range_years < 1:
            raise ValueError(
                f"OMH_BODY_MEDIA_MAX_RANGE_YEARS must be at least 1: {self.body_media_max_range_years}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            log_format=os.getenv("OMH_LOG_FORMAT", cls.log_format),
            payload_id_separator=os.getenv("OMH_PAYLOAD_ID_SEPARATOR", cls.payload_id_separator),
            max_num_to_return=int(os.getenv("OMH_MAX_NUM_TO_RETURN", cls.max_num_to_return)),
            body_media_max_range_years=int(
                os.getenv("OMH_BODY_MEDIA_MAX_RANGE_YEARS", cls.body_media_max_range_years)
            ),
        )


def get_settings(_cache: dict[str, Settings] = {}) -> Settings:
    """Provide a simple cached settings object."""

    if "settings" not in _cache:
        _cache["settings"] = Settings.from_env()
    return _cache["settings"]
