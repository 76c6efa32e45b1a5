#!/usr/bin/env python3
"""
FormBot API server launcher.

Usage:
  python main.py
  python main.py --host 0.0.0.0 --port 8000
  python main.py --reload

Environment variables (see core/config.py):
  JWT_SECRET             Token signing key, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL           SQLAlchemy connection string. Required unless DEBUG=true.
  TOKEN_EXPIRE_SECONDS   Token lifetime (default 3600).
  STORE_TIMEOUT_SECONDS  Bound on store waits before answering 503 (default 5).
  DEBUG                  true = generate a dev secret and use a local SQLite file.
"""

import argparse

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the FormBot API server.")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=3000, help="Port to listen on (default: 3000)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
