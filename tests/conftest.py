"""Shared fixtures: a fake docker host that answers like OMERO in a container."""

import shlex
from collections import defaultdict
from fnmatch import fnmatchcase

import pytest

from omero_seed.client import OmeroCli
from omero_seed.compose import ComposeExec
from omero_seed.errors import CommandError
from omero_seed.shell import CommandResult

OMERO_BIN = "/opt/omero/server/OMERO.server/bin/omero"

SAMPLE_FILES = [
    "/repo/img/screen_14-b.png",
    "/repo/img/screen_14-a.png",
    "/repo/img/screen_15-a.png",
    "/repo/img/screen_16-a.png",
    "/repo/img/sub/screen_16-b.png",
    "/repo/img/roi.ome.tif",
    "/repo/img/notes.txt",
]


class FakeShell:
    """Record docker commands and answer them like a running OMERO container."""

    def __init__(self, files=None, cli_present=True, dir_present=True, ready_after=0):
        self.files = list(SAMPLE_FILES if files is None else files)
        self.cli_present = cli_present
        self.dir_present = dir_present
        self.ready_after = ready_after
        self.fail_on = None
        self.calls = []
        self.omero_calls = []
        self.pings = 0
        self._ids = defaultdict(int)
        self.closed = False

    def run(self, argv, check=True):
        self.calls.append(argv)
        if "logs" in argv:
            return CommandResult("omero | starting...\n", "", 0)
        result = self._exec(argv[-1])
        if check and not result.ok:
            raise CommandError("failed", command=argv[-1], exit_status=result.exit_status)
        return result

    def close(self):
        self.closed = True

    def _exec(self, script):
        if script.startswith("test -x"):
            return CommandResult("5.6.0\n", "", 0 if self.cli_present else 1)
        if script.startswith("test -d"):
            return CommandResult("", "", 0 if self.dir_present else 1)

        tokens = shlex.split(script)
        if tokens[0] == "find":
            pattern = tokens[tokens.index("-name") + 1]
            matches = [f for f in self.files if fnmatchcase(f.rsplit("/", 1)[-1], pattern)]
            return CommandResult("".join(m + "\0" for m in matches), "", 0)

        assert tokens[0] == OMERO_BIN
        args = tokens[tokens.index("-C") + 1:]
        while args and args[-1] in (">/dev/null", "2>&1"):
            args.pop()
        self.omero_calls.append(args)

        if self.fail_on and self.fail_on(args):
            return CommandResult("", "boom", 2)
        if args[0] == "hql":
            self.pings += 1
            return CommandResult("", "", 0 if self.pings > self.ready_after else 1)
        if args[:2] == ["obj", "new"]:
            return CommandResult(self._new(args[2]), "", 0)
        if args[:2] == ["tag", "create"]:
            return CommandResult(self._new("TagAnnotation"), "", 0)
        return CommandResult("", "", 0)

    def _new(self, kind):
        self._ids[kind] += 1
        return f"{kind}:{self._ids[kind]}\n"


@pytest.fixture
def shell():
    return FakeShell()


@pytest.fixture
def client(shell):
    compose = ComposeExec(shell, ".omero/docker-compose.yml", "omero")
    return OmeroCli(compose, OMERO_BIN, "root", "omero")
