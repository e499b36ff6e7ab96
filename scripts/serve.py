"""Run the bus-tracker Web API.

Usage:
    uv run python scripts/serve.py
    uv run python scripts/serve.py --host 0.0.0.0 --port 3001
    uv run python scripts/serve.py --routes routes.json   # override BUS_TRACKER_ROUTES
"""

from __future__ import annotations

import argparse
import logging
import os

from dotenv import load_dotenv

load_dotenv()

import uvicorn  # noqa: E402

from bus_tracker.config import Settings  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="College bus tracker — Web API")
    ap.add_argument("--host", default="127.0.0.1", help="Bind address")
    ap.add_argument("--port", type=int, default=3001, help="Bind port")
    ap.add_argument("--routes", default="", help="JSON route file (default: built-in catalog)")
    ap.add_argument("--reload", action="store_true", help="Reload on source changes")
    args = ap.parse_args()

    if args.routes:
        os.environ["BUS_TRACKER_ROUTES"] = args.routes

    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    uvicorn.run(
        "bus_tracker.web.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
