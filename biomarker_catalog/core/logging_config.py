import logging
import sys
from typing import List, Optional, TextIO

from .config import Settings, settings as default_settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Optional[Settings] = None, stream: Optional[TextIO] = None) -> None:
    """Root logging setup for scripts: a stream (stdout unless given), plus a file when LOG_FILE is set."""
    settings = settings or default_settings

    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
