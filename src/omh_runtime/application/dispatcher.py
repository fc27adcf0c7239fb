from __future__ import annotations

import logging
from typing import List, Optional

from omh_runtime.application.execution_context import ExecutionContext
from omh_runtime.application.registry import PayloadIdentifierRegistry, ohmage_registry, provider_registry
from omh_runtime.application.result import Failure, Result, malformed
from omh_runtime.domain.common.ids import OHMAGE_DOMAIN, OMH_PREFIX, is_blank, split_payload_id
from omh_runtime.domain.payload_ids.models import PayloadIdentifier
from omh_runtime.domain.sub_requests.models import SubRequest
from omh_runtime.settings import get_settings

logger = logging.getLogger(__name__)


class Dispatcher:
    """Turns a raw payload ID and an execution context into a provider read request."""

    def __init__(
        self,
        ohmage: Optional[PayloadIdentifierRegistry] = None,
        providers: Optional[PayloadIdentifierRegistry] = None,
        separator: Optional[str] = None,
    ) -> None:
        self.separator = separator or get_settings().payload_id_separator
        self.ohmage = ohmage or ohmage_registry(self.separator)
        self.providers = providers or provider_registry(self.separator)

    def split(self, payload_id: str) -> List[str]:
        return split_payload_id(payload_id, self.separator)

    def resolve(self, payload_id: Optional[str]) -> Result[PayloadIdentifier]:
        result = self._resolve(payload_id)
        if isinstance(result, Failure):
            logger.warning(f"Could not resolve payload ID {payload_id!r}: {result.message}")
        return result

    def _resolve(self, payload_id: Optional[str]) -> Result[PayloadIdentifier]:
        if is_blank(payload_id):
            return malformed("No payload ID was given.")
        parts = self.split(payload_id)
        if len(parts) < 2 or parts[0] != OMH_PREFIX:
            return malformed(f"The payload ID must start with '{OMH_PREFIX}{self.separator}<domain>'.")
        if parts[1] == OHMAGE_DOMAIN:
            return self.ohmage.resolve(parts)
        return self.providers.resolve(parts)

    def build(self, identifier: PayloadIdentifier, ctx: ExecutionContext) -> Result[Optional[SubRequest]]:
        """Build the read request for an already resolved identifier."""
        logger.info(f"Building the {identifier.kind} sub-request for {identifier.root_id!r}")
        result = identifier.to_sub_request(ctx)
        if isinstance(result, Failure):
            logger.warning(f"Could not build the {identifier.kind} sub-request: {result.message}")
        elif result.value is None:
            logger.info(f"No sub-request is generated for {identifier.kind} payload IDs")
        return result

    def dispatch(self, payload_id: Optional[str], ctx: ExecutionContext) -> Result[Optional[SubRequest]]:
        resolved = self.resolve(payload_id)
        if isinstance(resolved, Failure):
            return resolved
        return self.build(resolved.value, ctx)


_default: dict[str, Dispatcher] = {}


def get_dispatcher() -> Dispatcher:
    """Process-wide dispatcher; its registries are read-only after creation."""
    if "dispatcher" not in _default:
        _default["dispatcher"] = Dispatcher()
    return _default["dispatcher"]
