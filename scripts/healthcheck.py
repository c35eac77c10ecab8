"""Container healthcheck: verify the schemalens-mcp HTTP /health endpoint.

Uses stdlib only. Exit code 0 indicates healthy. The URL can be overridden
with the first command-line argument or SCHEMALENS_MCP_HEALTH_URL.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Final
from urllib.error import URLError
from urllib.request import Request, urlopen

DEFAULT_URL: Final[str] = "http://127.0.0.1:8000/health"
SERVICE_NAME: Final[str] = "schemalens-mcp"


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    url = args[0] if args else os.getenv("SCHEMALENS_MCP_HEALTH_URL", DEFAULT_URL)
    req = Request(url, headers={"User-Agent": f"{SERVICE_NAME}/healthcheck"})  # noqa: S310
    try:
        with urlopen(req, timeout=4) as resp:  # noqa: S310 - operator-supplied URL
            if resp.status != 200:  # noqa: PLR2004
                print(f"unexpected status: {resp.status}", file=sys.stderr)
                return 1
            data = json.loads(resp.read().decode("utf-8"))
    except (URLError, OSError, ValueError) as exc:
        print(f"healthcheck error: {exc}", file=sys.stderr)
        return 1
    if data.get("status") != "healthy" or data.get("service") != SERVICE_NAME:
        print(f"payload not healthy: {data}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - used by Docker
    raise SystemExit(main())
