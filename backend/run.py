"""
InvoiceBolt Backend — Uvicorn Launcher

Usage:
    python run.py
    python run.py --port 8000 --reload
    STORE_BACKEND=sql python run.py --workers 4
"""
import argparse
from typing import List, Optional

import uvicorn

from invoicebolt.config import Settings, get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="InvoiceBolt Launch API Server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Enable hot reload for development")
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Worker processes (default: 1). More than one needs STORE_BACKEND=sql",
    )
    return parser


def check_workers(workers: int, settings: Settings) -> Optional[str]:
    """Error message when the worker count cannot share the configured store."""
    if workers < 1:
        return "--workers must be at least 1"
    if workers > 1 and settings.STORE_BACKEND == "memory":
        # Each process would hold its own records; a verify could miss its order
        return (
            f"--workers {workers} needs a shared store; "
            "set STORE_BACKEND=sql or run a single worker"
        )
    return None


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    error = check_workers(args.workers, settings)
    if error:
        parser.error(error)

    print(f"""
    ========================================================
      {settings.APP_NAME} v{settings.APP_VERSION}
      API:      http://{args.host}:{args.port}
      Docs:     http://localhost:{args.port}/docs
      Health:   http://localhost:{args.port}/health
      Store:    {settings.STORE_BACKEND} x {args.workers} worker(s)
      Payments: {'enabled' if settings.payments_enabled else 'disabled'}
      Email:    {'enabled' if settings.email_enabled else 'disabled'}
    ========================================================
    """)

    uvicorn.run(
        "invoicebolt.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
