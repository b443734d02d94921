"""Checks run before talking to the OMERO server."""

import logging

from .client import OmeroCli
from .errors import CommandError, PreflightError

logger = logging.getLogger(__name__)


def check_cli(client: OmeroCli) -> str:
    """Verify the OMERO CLI exists and is executable in the container.

    Args:
        client: CLI client for the container

    Returns:
        Version string printed by the CLI

    Raises:
        PreflightError: If the binary is missing or not executable
    """
    try:
        result = client.version()
    except CommandError as e:
        raise PreflightError(f"Cannot reach the OMERO container: {e}") from e

    if not result.ok:
        raise PreflightError(f"OMERO CLI not found/executable at {client.omero_bin}")

    version = result.stdout.strip() or result.stderr.strip()
    logger.info(f"OMERO CLI version: {version}")
    return version


def check_data_dir(client: OmeroCli, img_dir: str, repo_dir: str):
    """Verify the image directory is mounted in the container.

    Raises:
        PreflightError: If the directory is missing
    """
    try:
        mounted = client.has_directory(img_dir)
    except CommandError as e:
        raise PreflightError(f"Cannot reach the OMERO container: {e}") from e

    if not mounted:
        raise PreflightError(
            f"Repo not mounted at {repo_dir}. "
            f"Ensure override has: volumes: - ..:{repo_dir}:ro"
        )
    logger.info(f"Image directory present: {img_dir}")
