"""Run the router: ``python -m maestro --env .env``."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys

from pydantic import ValidationError

from maestro.config import MaestroConfig
from maestro.core.errors import TransportConnectError
from maestro.core.framework import Maestro
from maestro.transport.base import Credentials

logger = logging.getLogger("maestro")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="maestro",
        description="Route chat-room messages to the participant who should answer.",
    )
    parser.add_argument("--env", default=".env", help="key=value config file (default: .env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    return parser.parse_args(argv)


async def _run(config: MaestroConfig) -> int:
    maestro = Maestro.from_config(config)
    try:
        await maestro.start(
            config.url,
            config.room,
            Credentials(user=config.user, password=config.password),
        )
    except TransportConnectError:
        await maestro.close()
        return 1
    try:
        await maestro.run_forever()
    finally:
        await maestro.close()
    return 1 if maestro.session_lost else 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = MaestroConfig.from_env_file(args.env)
    except FileNotFoundError:
        logger.error("Config file %s not found", args.env)
        return 2
    except ValidationError as exc:
        logger.error("Invalid config in %s:\n%s", args.env, exc)
        return 2

    with contextlib.suppress(KeyboardInterrupt):
        return asyncio.run(_run(config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
