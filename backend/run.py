"""
Development Server Entry Point
==============================

Serves the incident tracker through uvicorn's application factory
support, optionally refilling the database with sample incidents first.

Usage:
    python run.py                      # reload on code changes
    python run.py --no-reload --port 9000
    python run.py --seed 200           # reseed, then serve
"""

import argparse
from typing import Optional


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the incident tracker API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument("--no-reload", action="store_true", help="Do not watch for code changes")
    parser.add_argument(
        "--seed",
        type=int,
        metavar="COUNT",
        default=None,
        help="Replace all incidents with COUNT sample incidents before serving",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    import uvicorn
    from app.core.config import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.seed is not None:
        from app.db import seed

        seed.main(["--count", str(args.seed)])

    print(f"{settings.APP_NAME} {settings.APP_VERSION} ({settings.ENVIRONMENT})")
    print(f"Listening on http://{args.host}:{args.port}{settings.API_PREFIX}/incidents")

    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
