"""Command line entry point: ``omero-seed``."""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from .client import OmeroCli
from .compose import ComposeExec
from .config import SeedConfig, load_config
from .errors import SeedError
from .populate import Seeder
from .preflight import check_cli, check_data_dir
from .readiness import wait_until_ready
from .shell import LocalShell, SSHShell

logger = logging.getLogger(__name__)


def setup_logging(log_level: str):
    """Configure logging for a seeding run."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("omero_seed").setLevel(level)

    # paramiko logs every channel at INFO
    if level != logging.DEBUG:
        logging.getLogger("paramiko").setLevel(logging.WARNING)


def make_shell(config: SeedConfig):
    if config.ssh_host:
        return SSHShell(
            config.ssh_host,
            user=config.ssh_user,
            key_file=config.ssh_key_file,
            workdir=config.ssh_workdir,
        )
    return LocalShell()


def make_client(config: SeedConfig, shell) -> OmeroCli:
    compose = ComposeExec(shell, config.compose_file, config.service)
    return OmeroCli(
        compose,
        omero_bin=config.omero_bin,
        username=config.username,
        password=config.password,
        host=config.host,
        port=config.port,
    )


def seed(config: SeedConfig, shell, skip_import: bool = False, sleep=time.sleep):
    """Run preflight checks, wait for the server and populate it.

    Raises:
        SeedError: On the first failure
    """
    client = make_client(config, shell)

    check_cli(client)
    check_data_dir(client, config.img_dir, config.repo_dir)

    wait_until_ready(
        client,
        attempts=config.ready_attempts,
        interval=config.ready_interval,
        log_tail=config.log_tail,
        sleep=sleep,
    )

    return Seeder(client, config.img_dir).run(skip_import=skip_import)


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to JSON/YAML configuration file",
)
@click.option("--compose-file", help="docker compose file of the OMERO stack")
@click.option("--service", help="Compose service running OMERO.server")
@click.option("--user", "username", help="OMERO username (default: $OMERO_USER or root)")
@click.option("--password", help="OMERO password (default: $OMERO_PASS or omero)")
@click.option("--img-dir", help="Image directory inside the container")
@click.option("--ready-attempts", type=int, help="Readiness polls before giving up")
@click.option("--ready-interval", type=int, help="Seconds between readiness polls")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
)
@click.option("--ssh-host", help="Run docker compose on this host over SSH")
@click.option("--ssh-user", help="SSH username")
@click.option("--ssh-key-file", help="Path to SSH private key file")
@click.option("--ssh-workdir", help="Directory on the SSH host holding the compose file")
@click.option("--skip-import", is_flag=True, help="Do not import images")
def main(
    config_path: Optional[Path],
    skip_import: bool,
    **overrides,
):
    """Populate an OMERO server in docker compose with test data."""
    try:
        config = load_config(config_path)
    except SeedError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)

    # Override with command-line arguments
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)

    setup_logging(config.log_level)

    for key in ("compose_file", "service", "omero_bin", "repo_dir", "img_dir", "username"):
        click.echo(f"{key + ':':14s}{getattr(config, key)}")
    click.echo(f"{'server:':14s}{config.host}:{config.port} (SSL)")
    if config.ssh_host:
        click.echo(f"{'ssh:':14s}{config.ssh_user}@{config.ssh_host}")

    shell = make_shell(config)
    try:
        seed(config, shell, skip_import=skip_import)
    except SeedError as e:
        logger.debug("Seeding aborted", exc_info=True)
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)
    finally:
        shell.close()


if __name__ == "__main__":
    main()
