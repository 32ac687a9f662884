import logging
from typing import Optional

from app.core.config import LOG_LEVEL


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging once for the whole API."""
    log_level = level or LOG_LEVEL
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=numeric_level,
        force=True,
    )
