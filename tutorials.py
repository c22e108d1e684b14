#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tutorial service (SQLite + FastAPI)

Commands:
  init                Create the tutorial and operation_log tables in the configured DB
  serve               Run the HTTP API under uvicorn

Notes:
- The DB path comes from TUTORIAL_DB_PATH, then config.yaml (db_path), then ./tutorials.db.
- `init` is idempotent; the server also applies the schema on startup.
"""

import argparse
import logging
import sys

from tutorial_backend.db import ensure_schema, get_db_path


def cmd_init(args):
    path = args.db or get_db_path()
    ensure_schema(path)
    print(f"Initialized schema at {path}")


def cmd_serve(args):
    import uvicorn

    uvicorn.run("tutorial_backend.api:app", host=args.host, port=args.port, reload=args.reload)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tutorial service (SQLite + FastAPI)")
    parser.add_argument("--log-level", default="INFO", help="root logging level")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="create tables")
    p_init.add_argument("--db", default=None, help="explicit SQLite file path")
    p_init.set_defaults(func=cmd_init)

    p_serve = sub.add_parser("serve", help="run the API server")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8080)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
