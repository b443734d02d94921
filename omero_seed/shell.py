"""Run command lines on the docker host, locally or over SSH."""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from paramiko import SSHClient, AutoAddPolicy, SSHException

from .errors import CommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    exit_status: int

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


def _check(command: str, result: CommandResult) -> CommandResult:
    if not result.ok:
        logger.debug(f"STDOUT: {result.stdout}")
        logger.debug(f"STDERR: {result.stderr}")
        raise CommandError(
            f"Command failed with exit code {result.exit_status}: {command[:200]}",
            command=command,
            exit_status=result.exit_status,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result


class LocalShell:
    """Run commands on this machine with subprocess."""

    def __init__(self, workdir: Optional[str] = None):
        self.workdir = workdir

    def run(self, argv: List[str], check: bool = True) -> CommandResult:
        """Execute a command and capture its output.

        Args:
            argv: Program and arguments
            check: Raise CommandError on a non-zero exit status

        Returns:
            CommandResult with decoded stdout/stderr
        """
        command = shlex.join(argv)
        logger.debug(f"Running: {command[:200]}")
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                cwd=self.workdir,
            )
        except FileNotFoundError as e:
            raise CommandError(
                f"Cannot execute {argv[0]}: {e}", command=command
            ) from e

        result = CommandResult(proc.stdout, proc.stderr, proc.returncode)
        if check:
            _check(command, result)
        return result

    def close(self):
        pass


class SSHShell:
    """Run commands on a remote docker host over SSH."""

    def __init__(
        self,
        host: str,
        user: str = "root",
        key_file: Optional[str] = None,
        workdir: Optional[str] = None,
        timeout: int = 30,
    ):
        self.host = host
        self.user = user
        self.key_file = key_file
        self.workdir = workdir
        self.timeout = timeout
        self._ssh: Optional[SSHClient] = None

    def connect(self):
        """Open the SSH connection if it is not open yet."""
        if self._ssh is not None:
            return

        logger.info(f"Connecting to {self.user}@{self.host}...")
        ssh = SSHClient()
        ssh.set_missing_host_key_policy(AutoAddPolicy())

        connect_kwargs = {
            "hostname": self.host,
            "username": self.user,
            "timeout": self.timeout,
        }
        if self.key_file:
            key_path = Path(self.key_file).expanduser()
            if key_path.exists():
                connect_kwargs["key_filename"] = str(key_path)
            else:
                logger.warning(
                    f"Key file {self.key_file} not found, trying default keys"
                )

        try:
            ssh.connect(**connect_kwargs)
        except (SSHException, OSError) as e:
            ssh.close()
            raise CommandError(f"SSH connection to {self.host} failed: {e}") from e
        self._ssh = ssh

    def run(self, argv: List[str], check: bool = True) -> CommandResult:
        """Execute a command on the remote host.

        Args:
            argv: Program and arguments, quoted for the remote shell here
            check: Raise CommandError on a non-zero exit status

        Returns:
            CommandResult with decoded stdout/stderr
        """
        self.connect()
        command = shlex.join(argv)
        if self.workdir:
            command = f"cd {shlex.quote(self.workdir)} && {command}"

        logger.debug(f"Running on {self.host}: {command[:200]}")
        stdin, stdout, stderr = self._ssh.exec_command(command)
        exit_status = stdout.channel.recv_exit_status()

        out = stdout.read().decode("utf-8")
        err = stderr.read().decode("utf-8")

        result = CommandResult(out, err, exit_status)
        if check:
            _check(command, result)
        return result

    def close(self):
        """Close the SSH connection."""
        if self._ssh is not None:
            self._ssh.close()
            self._ssh = None
