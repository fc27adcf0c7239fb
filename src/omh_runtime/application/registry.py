from __future__ import annotations

from typing import Callable, Dict, FrozenSet, Sequence

from omh_runtime.application.result import Result, malformed
from omh_runtime.domain.common.ids import DEFAULT_SEPARATOR
from omh_runtime.domain.payload_ids.builders import (
    build_body_media,
    build_campaign,
    build_entra,
    build_ginger_io,
    build_healthvault,
    build_mind_my_meds,
    build_observer,
    build_runkeeper,
)
from omh_runtime.domain.payload_ids.models import PayloadIdentifier

BuilderFn = Callable[[Sequence[str], str], Result[PayloadIdentifier]]

OHMAGE_DISCRIMINATOR_INDEX = 2
PROVIDER_DISCRIMINATOR_INDEX = 1


class PayloadIdentifierRegistry:
    """Maps the token at a fixed position of a split payload ID to its builder."""

    def __init__(self, discriminator_index: int, separator: str = DEFAULT_SEPARATOR) -> None:
        self.discriminator_index = discriminator_index
        self.separator = separator
        self._builders: Dict[str, BuilderFn] = {}

    def register(self, token: str, builder: BuilderFn) -> None:
        if not token or not token.strip():
            raise ValueError("The token is blank.")
        if token in self._builders:
            raise ValueError(f"The token has already been registered: {token}")
        self._builders[token] = builder

    def tokens(self) -> FrozenSet[str]:
        return frozenset(self._builders)

    def resolve(self, parts: Sequence[str]) -> Result[PayloadIdentifier]:
        if len(parts) <= self.discriminator_index:
            return malformed("The payload ID is too short.")
        token = parts[self.discriminator_index]
        builder = self._builders.get(token)
        if builder is None:
            return malformed(f"The payload ID type is unknown: {token}")
        return builder(parts, self.separator)


def ohmage_registry(separator: str = DEFAULT_SEPARATOR) -> PayloadIdentifierRegistry:
    """Registry for ``omh:ohmage:<type>:...`` payload IDs."""
    registry = PayloadIdentifierRegistry(OHMAGE_DISCRIMINATOR_INDEX, separator)
    registry.register("campaign", build_campaign)
    registry.register("observer", build_observer)
    return registry


def provider_registry(separator: str = DEFAULT_SEPARATOR) -> PayloadIdentifierRegistry:
    """Registry for third-party ``omh:<domain>:...`` payload IDs."""
    registry = PayloadIdentifierRegistry(PROVIDER_DISCRIMINATOR_INDEX, separator)
    registry.register("body_media", build_body_media)
    registry.register("runkeeper", build_runkeeper)
    registry.register("healthvault", build_healthvault)
    registry.register("ginger_io", build_ginger_io)
    registry.register("mind_my_meds", build_mind_my_meds)
    registry.register("entra", build_entra)
    return registry
