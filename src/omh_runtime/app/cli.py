from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from omh_runtime.application.dispatcher import get_dispatcher
from omh_runtime.application.execution_context import ExecutionContext
from omh_runtime.application.result import Failure
from omh_runtime.domain.common.columns import ColumnNode
from omh_runtime.domain.common.temporal import parse_timestamp
from omh_runtime.observability.logging import configure_logging


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="OMH Runtime CLI")
    parser.add_argument("--log-level", dest="log_level")
    subparsers = parser.add_subparsers(dest="command")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a payload ID and build its read request")
    resolve_parser.add_argument("--payload-id", required=True, dest="payload_id")
    resolve_parser.add_argument("--requester", required=True, dest="client")
    resolve_parser.add_argument("--payload-version", type=int, dest="version")
    resolve_parser.add_argument("--owner")
    resolve_parser.add_argument("--start", dest="start_date", type=parse_timestamp)
    resolve_parser.add_argument("--end", dest="end_date", type=parse_timestamp)
    resolve_parser.add_argument("--columns", dest="columns", type=ColumnNode.parse)
    resolve_parser.add_argument("--num-to-skip", type=int, default=0)
    resolve_parser.add_argument("--num-to-return", type=int)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    if args.command != "resolve":
        parser.print_help()
        return 2

    ctx = ExecutionContext.from_args(
        parameters={"requester": [args.client]},
        client=args.client,
        version=args.version,
        owner=args.owner,
        start_date=args.start_date,
        end_date=args.end_date,
        num_to_skip=args.num_to_skip,
        num_to_return=args.num_to_return,
        columns=args.columns,
    )
    result = get_dispatcher().dispatch(args.payload_id, ctx)
    if isinstance(result, Failure):
        print(json.dumps({"error": {"code": result.code.value, "kind": result.kind.value, "message": result.message}}))
        return 1

    sub_request = result.value
    if sub_request is None:
        print(json.dumps({"sub_request": None}))
    else:
        body = sub_request.model_dump(mode="json", exclude={"parameters", "columns"})
        print(json.dumps({"provider": sub_request.provider, "sub_request": body}, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
