"""Typed client over the ``omero`` command line running in the container."""

import logging
import re
import shlex
from dataclasses import dataclass
from typing import List, Optional, Union

from .compose import ComposeExec
from .errors import CommandError
from .shell import CommandResult

logger = logging.getLogger(__name__)

_REF_RE = re.compile(r"^([A-Za-z]+):(\d+)$")

READINESS_QUERY = "select count(e.id) from Experimenter e"


@dataclass(frozen=True)
class ObjectRef:
    """Reference to a server object, printed by the CLI as ``Kind:id``."""

    kind: str
    id: int

    def __str__(self) -> str:
        return f"{self.kind}:{self.id}"

    @classmethod
    def parse(cls, text: str) -> "ObjectRef":
        """Parse the reference from the last non-empty line of CLI output.

        Args:
            text: stdout of ``obj new`` or ``tag create``

        Returns:
            ObjectRef

        Raises:
            CommandError: If no ``Kind:id`` line is present
        """
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        match = _REF_RE.match(lines[-1]) if lines else None
        if not match:
            raise CommandError(f"Expected 'Kind:id' in output, got {text.strip()!r}")
        return cls(match.group(1), int(match.group(2)))


def image(index: int) -> ObjectRef:
    """Reference an image by its server-side id."""
    return ObjectRef("Image", index)


FieldValue = Union[str, int, ObjectRef]


class OmeroCli:
    """Run ``omero`` subcommands with fixed connection flags.

    Every creating call returns the ObjectRef the server assigned, so later
    calls take typed references instead of interpolated strings.
    """

    def __init__(
        self,
        compose: ComposeExec,
        omero_bin: str,
        username: str,
        password: str,
        host: str = "localhost",
        port: int = 4064,
    ):
        self.compose = compose
        self.omero_bin = omero_bin
        self.username = username
        self.password = password
        self.host = host
        self.port = port

    def _argv(self, *args: str) -> List[str]:
        return [
            self.omero_bin,
            "-u", self.username,
            "-w", self.password,
            "-s", self.host,
            "-p", str(self.port),
            "-C", *args,
        ]

    def run(self, *args: str, check: bool = True, quiet: bool = False) -> CommandResult:
        """Run one ``omero`` subcommand in the container.

        Args:
            args: Subcommand and its arguments
            check: Raise CommandError on a non-zero exit status
            quiet: Discard the command's output inside the container

        Returns:
            CommandResult of the exec
        """
        logger.debug(f"omero {' '.join(args)}")
        script = shlex.join(self._argv(*args))
        if quiet:
            script += " >/dev/null 2>&1"
        return self.compose.exec(script, check=check)

    # Container probes

    def version(self) -> CommandResult:
        """Check the CLI binary is executable and print its version."""
        binary = shlex.quote(self.omero_bin)
        return self.compose.exec(f"test -x {binary} && {binary} version", check=False)

    def has_directory(self, directory: str) -> bool:
        """Return True if ``directory`` exists and is listable in the container."""
        d = shlex.quote(directory)
        return self.compose.exec(f"test -d {d} && ls -la {d} >/dev/null", check=False).ok

    def find_files(self, directory: str, pattern: str) -> List[str]:
        """List regular files under ``directory`` matching ``pattern``, sorted."""
        script = shlex.join(["find", directory, "-type", "f", "-name", pattern, "-print0"])
        result = self.compose.exec(script)
        return sorted(f for f in result.stdout.split("\0") if f)

    # Queries

    def hql(self, query: str, check: bool = True, quiet: bool = False) -> CommandResult:
        return self.run("hql", query, check=check, quiet=quiet)

    def ping(self) -> bool:
        """Return True if the server answers a lightweight count query."""
        try:
            return self.hql(READINESS_QUERY, check=False, quiet=True).ok
        except CommandError as e:
            logger.debug(f"Readiness query could not run: {e}")
            return False

    def search(
        self,
        kind: str,
        date_from: str,
        date_to: str,
        date_type: Optional[str] = None,
    ) -> str:
        args = ["search", kind, f"--from={date_from}", f"--to={date_to}"]
        if date_type:
            args.append(f"--date-type={date_type}")
        return self.run(*args).stdout

    # Object creation

    def obj_new(self, kind: str, **fields: Optional[FieldValue]) -> ObjectRef:
        """Create an object with ``obj new`` and return its reference.

        Fields set to None are left out.
        """
        args = ["obj", "new", kind]
        args += [f"{k}={v}" for k, v in fields.items() if v is not None]
        return ObjectRef.parse(self.run(*args).stdout)

    def new_dataset(self, name: str) -> ObjectRef:
        return self.obj_new("Dataset", name=name)

    def new_project(self, name: str) -> ObjectRef:
        return self.obj_new("Project", name=name)

    def new_map_annotation(self, ns: Optional[str] = None) -> ObjectRef:
        return self.obj_new("MapAnnotation", ns=ns)

    def link(self, link_kind: str, parent: ObjectRef, child: ObjectRef) -> ObjectRef:
        """Create a ``<link_kind>`` from ``parent`` to ``child``."""
        return self.obj_new(link_kind, parent=parent, child=child)

    def map_set(self, annotation: ObjectRef, key: str, value: str) -> CommandResult:
        return self.run("obj", "map-set", str(annotation), "mapValue", key, value)

    def tag_create(self, name: str) -> ObjectRef:
        return ObjectRef.parse(self.run("tag", "create", "--name", name).stdout)

    def import_file(self, path: str, dataset: ObjectRef) -> CommandResult:
        """Import one file into ``dataset``."""
        return self.run("import", path, "-d", str(dataset))
