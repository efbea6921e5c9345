import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

from snalab.api.server import create_app

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Start the SNA Lab API server")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=5000,
        help="Port to bind to (default: 5000)"
    )
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite document store path (default: SNALAB_DB_PATH or data/snalab.db)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode"
    )
    return parser.parse_args(argv)


def main():
    args = parse_args()

    # Configure logging level via environment if not set
    if not os.getenv("API_LOG_LEVEL"):
        os.environ["API_LOG_LEVEL"] = "DEBUG" if args.debug else "INFO"

    overrides = {"DB_PATH": args.db} if args.db else None
    app = create_app(overrides)
    logger.info("Starting SNA Lab API on http://%s:%d", args.host, args.port)
    print(f"Starting SNA Lab API server on http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
