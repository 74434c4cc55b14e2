#!/usr/bin/env python3
"""
Local development server runner.

Runs the FastAPI application using uvicorn. By default the in-process
store is used, seeded with the demo event
00000000-0000-0000-0000-000000000000 (secret: "secret").

Usage:
    python run_local.py
    python run_local.py --port 3000
    python run_local.py --reload  # Auto-reload on code changes
    python run_local.py --backend dynamodb --endpoint-url http://localhost:8001
"""

import argparse
import os
from pathlib import Path

import uvicorn

project_root = Path(__file__).parent


def main():
    parser = argparse.ArgumentParser(
        description="Run the Q&A API locally with uvicorn"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port to run the server on (default: 3000)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes"
    )
    parser.add_argument(
        "--backend",
        choices=["local", "dynamodb"],
        default=None,
        help="Storage backend (default: STORAGE_BACKEND or 'local')"
    )
    parser.add_argument(
        "--endpoint-url",
        default=None,
        help="DynamoDB endpoint override, e.g. DynamoDB Local"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for uvicorn (default: info)"
    )

    args = parser.parse_args()

    # Settings are read from the environment when qanda is imported,
    # so CLI overrides must be exported before uvicorn loads the app.
    if args.backend:
        os.environ["STORAGE_BACKEND"] = args.backend
    if args.endpoint_url:
        os.environ["DYNAMODB_ENDPOINT_URL"] = args.endpoint_url

    print("=" * 60)
    print("Starting Q&A API (Local Development)")
    print("=" * 60)
    print(f"Server: http://{args.host}:{args.port}")
    print(f"API Docs: http://{args.host}:{args.port}/docs")
    print(f"Backend: {os.environ.get('STORAGE_BACKEND', 'local')}")
    print("=" * 60)

    uvicorn.run(
        "qanda.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        reload_dirs=[str(project_root / "src")] if args.reload else None
    )


if __name__ == "__main__":
    main()
