from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional

from omh_runtime.domain.common.columns import ColumnNode
from omh_runtime.domain.sub_requests.models import TokenLocation
from omh_runtime.settings import get_settings


@dataclass(frozen=True)
class ExecutionContext:
    """Everything a payload identifier needs to build its provider's read request."""

    parameters: Mapping[str, List[str]]
    hash_password: Optional[bool]
    token_location: Optional[TokenLocation]
    client: Optional[str]
    version: Optional[int]
    owner: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    num_to_skip: int
    num_to_return: int
    columns: ColumnNode = field(default_factory=ColumnNode)

    @classmethod
    def from_args(
        cls,
        parameters: Optional[Mapping[str, Any]] = None,
        hash_password: Optional[bool] = True,
        token_location: Optional[TokenLocation] = TokenLocation.EITHER,
        client: Optional[str] = None,
        version: Optional[int] = None,
        owner: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        num_to_skip: int = 0,
        num_to_return: Optional[int] = None,
        columns: Optional[ColumnNode] = None,
    ) -> "ExecutionContext":
        return cls(
            parameters=parameters if parameters is not None else {},
            hash_password=hash_password,
            token_location=token_location,
            client=client,
            version=version,
            owner=owner,
            start_date=start_date,
            end_date=end_date,
            num_to_skip=num_to_skip,
            num_to_return=get_settings().max_num_to_return if num_to_return is None else num_to_return,
            columns=columns if columns is not None else ColumnNode(),
        )
