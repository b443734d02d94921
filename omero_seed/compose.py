"""Execute shell snippets inside a docker compose service."""

import logging
from typing import List

from .errors import CommandError
from .shell import CommandResult

logger = logging.getLogger(__name__)


class ComposeExec:
    """Thin wrapper around ``docker compose exec -T <service> sh -lc``."""

    def __init__(self, shell, compose_file: str, service: str):
        """Initialize the wrapper.

        Args:
            shell: LocalShell or SSHShell running on the docker host
            compose_file: Path of the compose file on the docker host
            service: Name of the compose service running OMERO
        """
        self.shell = shell
        self.compose_file = compose_file
        self.service = service

    def _compose(self, *args: str) -> List[str]:
        return ["docker", "compose", "-f", self.compose_file, *args]

    def exec(self, script: str, check: bool = True) -> CommandResult:
        """Run a ``sh -lc`` script in the service container.

        Args:
            script: Shell snippet, already quoted for ``sh``
            check: Raise CommandError on a non-zero exit status

        Returns:
            CommandResult of the exec
        """
        argv = self._compose("exec", "-T", self.service, "sh", "-lc", script)
        return self.shell.run(argv, check=check)

    def logs(self, tail: int = 25) -> str:
        """Return the last lines of the service log, or '' if unavailable."""
        argv = self._compose("logs", "--no-color", f"--tail={tail}", self.service)
        try:
            result = self.shell.run(argv, check=False)
        except CommandError as e:
            logger.debug(f"Could not fetch {self.service} logs: {e}")
            return ""
        if not result.ok:
            logger.debug(f"Could not fetch {self.service} logs: {result.stderr.strip()}")
            return ""
        return result.stdout
