"""
Entry point for the vacation service.

    erp-vacation --port 8080
    python -m vacation --reload
"""
import argparse
from typing import Optional, Sequence

import uvicorn

from vacation.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="erp-vacation", description="ERP vacation service")
    parser.add_argument("--host", default=None, help="bind address (default: SERVER_HOST)")
    parser.add_argument("--port", type=int, default=None, help="bind port (default: SERVER_PORT)")
    parser.add_argument("--reload", action="store_true", help="restart on code changes (development)")
    parser.add_argument("--log-level", default=None, help="uvicorn log level (default: LOG_LEVEL)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    uvicorn.run(
        "web.app:app",
        host=args.host if args.host is not None else settings.server_host,
        port=args.port if args.port is not None else settings.server_port,
        reload=args.reload,
        log_level=(args.log_level or settings.log_level).lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
