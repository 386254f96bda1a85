#!/usr/bin/env python3
"""
TaskList -- multi-user to-do list API server.

Usage:
  python main.py
  python main.py --port 8000
  python main.py --host 0.0.0.0 --reload

Environment variables (or .env):
  SECRET_KEY     Required. Token signing key, at least 32 characters.
                 JWT_SECRET is accepted as an alternative name.
  DATABASE_URL   Required. SQLAlchemy URL, e.g. sqlite:///tasklist.db
  API_PREFIX     Optional route prefix, e.g. /api
"""

import argparse
import sys

import uvicorn
from pydantic import ValidationError

from core.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the TaskList API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=None, help="Bind address (default: HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT or 5000)")
    parser.add_argument("--reload", action="store_true", help="Restart the server when source files change")
    args = parser.parse_args()

    # Fail before uvicorn starts so a missing secret or database URL is one
    # clear message rather than a traceback from inside the worker import.
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"  [!] Configuration error:\n{e}", file=sys.stderr)
        sys.exit(2)

    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
