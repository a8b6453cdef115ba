"""Entry point: ``python -m taskmail``."""

import sys

import uvicorn

from taskmail.config import get_settings_eager
from taskmail.exceptions import ConfigError
from taskmail.logging import setup_logging


def main() -> int:
    try:
        settings = get_settings_eager()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(json=settings.log_json, level=settings.log_level)

    from taskmail.app import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
