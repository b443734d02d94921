"""Tests for the OMERO CLI client."""

import shlex

import pytest

from omero_seed.client import ObjectRef, image
from omero_seed.errors import CommandError


class TestObjectRef:
    """Test parsing of the references printed by the CLI."""

    def test_parse_simple(self):
        assert ObjectRef.parse("Dataset:12\n") == ObjectRef("Dataset", 12)

    def test_parse_uses_last_line(self):
        """Warnings printed before the reference are ignored."""
        out = "Using session for root@localhost:4064\nMapAnnotation:7\n\n"
        assert ObjectRef.parse(out) == ObjectRef("MapAnnotation", 7)

    def test_str_round_trips_cli_form(self):
        assert str(ObjectRef("TagAnnotation", 3)) == "TagAnnotation:3"

    @pytest.mark.parametrize("out", ["", "\n", "created", "Dataset:abc"])
    def test_parse_rejects_garbage(self, out):
        with pytest.raises(CommandError, match="Kind:id"):
            ObjectRef.parse(out)

    def test_image_ref(self):
        assert str(image(9)) == "Image:9"


class TestOmeroCli:
    """Test the commands the client sends into the container."""

    def test_connection_flags(self, client, shell):
        client.run("hql", "select 1")
        argv = shell.calls[-1]
        assert argv[:8] == [
            "docker", "compose", "-f", ".omero/docker-compose.yml",
            "exec", "-T", "omero", "sh",
        ]
        assert argv[8] == "-lc"
        tokens = shlex.split(argv[9])
        assert tokens[1:10] == [
            "-u", "root", "-w", "omero", "-s", "localhost", "-p", "4064", "-C",
        ]
        assert tokens[10:] == ["hql", "select 1"]

    def test_values_with_shell_metacharacters_survive(self, client, shell):
        ann = ObjectRef("MapAnnotation", 1)
        client.map_set(ann, "$foo*bar#ba", "some**thing")
        assert shell.omero_calls[-1] == [
            "obj", "map-set", "MapAnnotation:1", "mapValue", "$foo*bar#ba", "some**thing",
        ]

    def test_obj_new_returns_ref(self, client, shell):
        ref = client.new_dataset("Dataset 1")
        assert ref == ObjectRef("Dataset", 1)
        assert shell.omero_calls[-1] == ["obj", "new", "Dataset", "name=Dataset 1"]

    def test_map_annotation_without_namespace(self, client, shell):
        client.new_map_annotation(None)
        assert shell.omero_calls[-1] == ["obj", "new", "MapAnnotation"]

    def test_map_annotation_with_namespace(self, client, shell):
        client.new_map_annotation("/MouseCT/Skyscan/System")
        assert shell.omero_calls[-1] == [
            "obj", "new", "MapAnnotation", "ns=/MouseCT/Skyscan/System",
        ]

    def test_link_uses_refs(self, client, shell):
        parent = ObjectRef("Project", 4)
        child = ObjectRef("Dataset", 2)
        link = client.link("ProjectDatasetLink", parent, child)
        assert link.kind == "ProjectDatasetLink"
        assert shell.omero_calls[-1] == [
            "obj", "new", "ProjectDatasetLink", "parent=Project:4", "child=Dataset:2",
        ]

    def test_tag_create(self, client, shell):
        assert client.tag_create("TestTag") == ObjectRef("TagAnnotation", 1)
        assert shell.omero_calls[-1] == ["tag", "create", "--name", "TestTag"]

    def test_import_file(self, client, shell):
        client.import_file("/repo/img/a b.png", ObjectRef("Dataset", 5))
        assert shell.omero_calls[-1] == ["import", "/repo/img/a b.png", "-d", "Dataset:5"]

    def test_search_with_date_type(self, client, shell):
        client.search("Image", "2026-10-19", "2026-10-19", date_type="import")
        assert shell.omero_calls[-1] == [
            "search", "Image", "--from=2026-10-19", "--to=2026-10-19", "--date-type=import",
        ]

    def test_find_files_sorted(self, client):
        files = client.find_files("/repo/img", "*_14-*.png")
        assert files == ["/repo/img/screen_14-a.png", "/repo/img/screen_14-b.png"]

    def test_failed_command_raises(self, client, shell):
        shell.fail_on = lambda args: args[0] == "obj"
        with pytest.raises(CommandError):
            client.new_project("Project")

    def test_ping(self, client, shell):
        shell.ready_after = 1
        assert client.ping() is False
        assert client.ping() is True

    def test_ping_swallows_docker_errors(self, client, shell):
        def broken(argv, check=True):
            raise CommandError("Cannot execute docker")

        shell.run = broken
        assert client.ping() is False
