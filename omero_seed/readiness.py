"""Wait until the OMERO server accepts sessions."""

import logging
import time
from typing import Callable

from .client import OmeroCli
from .errors import ServerNotReady

logger = logging.getLogger(__name__)


def wait_until_ready(
    client: OmeroCli,
    attempts: int = 180,
    interval: float = 2,
    log_tail: int = 25,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll the server with a count query until it answers.

    Sleeps ``interval`` seconds between attempts, without backoff. After
    ``attempts`` failures one last query decides: if that fails too the
    server is declared unreachable.

    Args:
        client: CLI client for the container
        attempts: Number of polls before the final check
        interval: Seconds between polls
        log_tail: Lines of container log to show after each failed poll
        sleep: Sleep function

    Returns:
        Number of polls made, including the final check if it was needed

    Raises:
        ServerNotReady: If the final check fails
    """
    logger.info("Waiting for OMERO.server to accept sessions...")

    for attempt in range(1, attempts + 1):
        if client.ping():
            logger.info("OMERO is ready.")
            return attempt

        logger.info(f"  not ready yet ({attempt}/{attempts}) ...")
        logs = client.compose.logs(tail=log_tail)
        if logs:
            logger.info(logs.rstrip())
        sleep(interval)

    if not client.ping():
        raise ServerNotReady("OMERO never became ready")

    logger.info("OMERO is ready.")
    return attempts + 1
