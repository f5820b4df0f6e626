"""Main entry point for the screw puzzle server."""

import argparse
import logging
import sys

import uvicorn

from screw_puzzle.config import get_settings


def main():
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Screw Puzzle stage server"
    )
    parser.add_argument(
        '--host',
        type=str,
        default=settings.host,
        help=f'Host address (default: {settings.host})'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=settings.port,
        help=f'Port number (default: {settings.port})'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=settings.log_level,
        choices=['debug', 'info', 'warning', 'error'],
        help=f'Log level (default: {settings.log_level})'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    logger = logging.getLogger("screw_puzzle")
    logger.info("Server starting on http://%s:%d", args.host, args.port)

    try:
        uvicorn.run(
            "screw_puzzle.api.main:app",
            host=args.host,
            port=args.port,
            log_level=args.log_level
        )
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception as e:
        logger.error("Server error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
