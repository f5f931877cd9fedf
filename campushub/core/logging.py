import logging
from typing import Optional

from .config import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

logger = logging.getLogger("campushub")


def log_evt(level: str, action: str, event_id: Optional[str] = None, backend: Optional[str] = None, **kw):
    """key=value log line, e.g. ``action=registration_created event_id=mock1 backend=fallback``."""
    parts = [f"action={action}"]
    if event_id is not None:
        parts.append(f"event_id={event_id}")
    if backend is not None:
        parts.append(f"backend={backend}")
    for k, v in kw.items():
        if v is None:
            continue
        parts.append(f"{k}={v}")
    msg = " ".join(parts)

    lvl = level.lower()
    if lvl == "debug":
        logger.debug(msg)
    elif lvl == "warning":
        logger.warning(msg)
    elif lvl == "error":
        logger.error(msg)
    else:
        logger.info(msg)
