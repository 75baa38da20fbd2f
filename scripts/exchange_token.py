#!/usr/bin/env python3
"""Live token exchange check.

Posts a pre-built BrowserID assertion to a token server and prints the
outcome.  Assertion sourcing:
- ``--assertion`` argument
- TOKENSERVER_ASSERTION environment variable

The endpoint comes from ``--url`` or TOKENSERVER_URL (default: production).
Exit status is 0 on success, 1 on a remote refusal, 2 on a local failure.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pytokenserver import RemoteError, TokenServerClient, TokenServerConfig  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--assertion", default=os.environ.get("TOKENSERVER_ASSERTION"))
    parser.add_argument("--url", help="Token server endpoint URL")
    parser.add_argument("--client-state", help="Hex client state sent as X-Client-State")
    parser.add_argument("--audience", action="store_true", help="Print the audience for the endpoint and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    overrides = {"endpoint_url": args.url} if args.url else {}
    config = TokenServerConfig.from_env(**overrides)

    async with TokenServerClient(config) as client:
        if args.audience:
            print(client.audience)
            return 0
        if not args.assertion:
            print("No assertion given (use --assertion or TOKENSERVER_ASSERTION)", file=sys.stderr)
            return 2

        result = await client.exchange(args.assertion, client_state=args.client_state)

    if result.success_value is not None:
        token = result.success_value
        print(json.dumps({**token.as_json(), "key": "<redacted>"}, indent=2))
        return 0

    print(result.failure_value, file=sys.stderr)
    return 1 if isinstance(result.failure_value, RemoteError) else 2


def main() -> None:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
