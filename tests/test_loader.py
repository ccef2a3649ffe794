"""Tests for loading a directory tree into a snapshot."""

from pathlib import Path

from depgraph_cli.loader import SKIP_DIRS, load_source_files, virtual_path


def test_virtual_paths_are_rooted(tmp_path: Path):
    assert virtual_path(tmp_path, tmp_path / "src" / "a.ts") == "/src/a.ts"


def test_loads_sample_project(sample_project_path: Path):
    files = load_source_files(sample_project_path)
    paths = [f.path for f in files]

    assert len(files) == 11
    assert paths == sorted(paths)
    assert "/src/app/globals.css" in paths


def test_skips_dependency_and_build_dirs(tmp_path: Path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.ts").write_text("export const a = 1;")
    (tmp_path / "node_modules" / "react").mkdir(parents=True)
    (tmp_path / "node_modules" / "react" / "index.js").write_text("module.exports = {};")
    (tmp_path / ".next").mkdir()
    (tmp_path / ".next" / "build.js").write_text("")

    assert [f.path for f in load_source_files(tmp_path)] == ["/src/a.ts"]


def test_undecodable_files_are_kept_as_bytes(tmp_path: Path):
    (tmp_path / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")
    (tmp_path / "a.ts").write_text("export {};", encoding="utf-8")

    files = {f.path: f.content for f in load_source_files(tmp_path)}

    assert isinstance(files["/logo.png"], bytes)
    assert files["/a.ts"] == "export {};"


def test_custom_skip_dirs_leave_defaults_alone(tmp_path: Path):
    (tmp_path / "generated").mkdir()
    (tmp_path / "generated" / "api.ts").write_text("")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "x.js").write_text("")
    before = set(SKIP_DIRS)

    assert [f.path for f in load_source_files(tmp_path, skip_dirs={"generated"})] == ["/node_modules/x.js"]
    assert [f.path for f in load_source_files(tmp_path)] == ["/generated/api.ts"]
    assert SKIP_DIRS == before
