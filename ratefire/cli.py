from __future__ import annotations

import asyncio
import logging
import sys

from .config import LOG_LEVEL, ConfigError, build_parser, resolve
from .runner import run

log = logging.getLogger("ratefire")


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )


def main(argv: list[str] | None = None) -> int:
    try:
        config = resolve(argv)
    except ConfigError as e:
        print(f"ratefire: {e}", file=sys.stderr)
        print(build_parser().format_usage(), end="", file=sys.stderr)
        return 1

    setup_logging()
    log.info("Testing %s %s with %d requests per second", config.method, config.uri, config.rate)
    asyncio.run(run(config))
    return 0


def entrypoint() -> None:
    sys.exit(main())


if __name__ == "__main__":
    entrypoint()
