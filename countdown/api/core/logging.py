"""Rich console logging for the API process."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from countdown.api.core.config import Settings

# uvicorn's own loggers; access lines are noisy under storefront polling
QUIET_LOGGERS = {"uvicorn.access": logging.WARNING}


def setup_logging(settings: Settings) -> None:
    handler = RichHandler(
        console=Console(stderr=True, width=120),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )

    # uvicorn installs root handlers before create_app runs
    logging.basicConfig(
        level=logging.getLevelName(settings.log_level),
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).info(
        f"Log level {settings.log_level} ({settings.environment})"
    )
