"""End-to-end tests for the regeneration pipeline."""

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from metagen.regenerator import regenerate_manifest


def _children(manifest_path: Path) -> list[tuple[str, dict[str, str]]]:
    root = ET.parse(manifest_path).getroot()
    return [(child.tag, dict(child.attrib)) for child in root]


class TestRegenerateManifest:
    def test_classifies_resource_files(self, tmp_path: Path, make_files) -> None:
        make_files("a.cs", "b.dll", "c.pdb", "d.png")

        result = regenerate_manifest(tmp_path)

        assert result.success
        assert result.entries == 3
        assert _children(tmp_path / "meta.xml") == [
            ("script", {"src": "a.cs", "type": "server", "lang": "csharp"}),
            ("script", {"src": "b.dll", "type": "server", "lang": "compiled"}),
            ("file", {"src": "d.png"}),
        ]

    def test_hand_written_content_survives_and_stale_entries_go(
        self, tmp_path: Path, make_files
    ) -> None:
        make_files("new.png")
        (tmp_path / "meta.xml").write_text(
            '<meta><setting name="gamemode" value="race" /><file src="old.png" /></meta>',
            encoding="utf-8",
        )

        result = regenerate_manifest(tmp_path)

        assert result.success
        assert result.preserved == 1
        assert _children(tmp_path / "meta.xml") == [
            ("setting", {"name": "gamemode", "value": "race"}),
            ("file", {"src": "new.png"}),
        ]

    def test_output_is_idempotent(self, tmp_path: Path, make_files) -> None:
        make_files("a.cs", "Bin/Fuel.dll", "client/ui.js", "client/ui.js.map", "img/x.png")
        (tmp_path / "meta.xml").write_text(
            "<meta><!-- maps --><export function=\"f\"><arg n=\"1\" /></export></meta>",
            encoding="utf-8",
        )

        regenerate_manifest(tmp_path)
        first = (tmp_path / "meta.xml").read_bytes()
        regenerate_manifest(tmp_path)
        second = (tmp_path / "meta.xml").read_bytes()

        assert first == second

    def test_preserved_nodes_survive_repeated_runs(self, tmp_path: Path, make_files) -> None:
        make_files("a.cs")
        (tmp_path / "meta.xml").write_text(
            '<meta><info name="x" /><!-- note --><file src="a.cs" /></meta>', encoding="utf-8"
        )

        for _ in range(3):
            regenerate_manifest(tmp_path)

        text = (tmp_path / "meta.xml").read_text(encoding="utf-8")
        assert text.count('<info name="x" />') == 1
        assert text.count("<!-- note -->") == 1
        assert text.count("<file") == 0
        assert text.count('<script src="a.cs"') == 1

    def test_manifest_is_not_listed(self, tmp_path: Path, make_files) -> None:
        make_files("a.png")

        regenerate_manifest(tmp_path)
        regenerate_manifest(tmp_path)

        assert _children(tmp_path / "meta.xml") == [("file", {"src": "a.png"})]

    def test_nested_paths_are_relative(self, tmp_path: Path, make_files) -> None:
        make_files("Bin/Fuel.dll", "top.png")

        regenerate_manifest(tmp_path)

        assert [attrs["src"] for _, attrs in _children(tmp_path / "meta.xml")] == [
            "top.png",
            "Bin/Fuel.dll",
        ]

    def test_corrupt_manifest_is_left_untouched(self, tmp_path: Path, make_files) -> None:
        make_files("a.png")
        corrupt = "<meta><setting></meta>"
        (tmp_path / "meta.xml").write_text(corrupt, encoding="utf-8")

        result = regenerate_manifest(tmp_path)

        assert not result.success
        assert "parse" in result.error
        assert (tmp_path / "meta.xml").read_text(encoding="utf-8") == corrupt

    def test_write_failure_is_reported(
        self, tmp_path: Path, make_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        make_files("a.png")

        def deny(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("metagen.writer.os.replace", deny)

        result = regenerate_manifest(tmp_path)

        assert not result.success
        assert "Permission denied" in result.error
        assert not (tmp_path / "meta.xml").exists()

    def test_explicit_manifest_path(self, tmp_path: Path, make_files) -> None:
        make_files("a.png")
        target = tmp_path / "meta.xml"

        result = regenerate_manifest(tmp_path, target)

        assert result.manifest_path == str(target)
        assert target.exists()
