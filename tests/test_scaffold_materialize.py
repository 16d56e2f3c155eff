from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from research_scaffold.errors import IOFailure, PartialFailure
from research_scaffold.scaffold.materialize import materialize, materialize_all
from research_scaffold.scaffold.types import Artifact


def test_directory_creates_intermediates_then_skips(tmp_path) -> None:
    art = Artifact.directory(PurePosixPath("a/b/c"))

    first = materialize(tmp_path, art, "keep_existing")
    assert first.action == "written"
    assert (tmp_path / "a" / "b" / "c").is_dir()

    second = materialize(tmp_path, art, "overwrite")
    assert second.action == "skipped"


def test_text_file_keep_existing_preserves_user_edits(tmp_path) -> None:
    art = Artifact.text_file(PurePosixPath("notes/README.md"), "generated\n")
    assert materialize(tmp_path, art, "keep_existing").action == "written"

    target = tmp_path / "notes" / "README.md"
    target.write_text("my edits\n", encoding="utf-8")

    res = materialize(tmp_path, art, "keep_existing")
    assert res.action == "skipped"
    assert target.read_text(encoding="utf-8") == "my edits\n"


def test_text_file_overwrite_replaces_content(tmp_path) -> None:
    target = tmp_path / "LICENSE"
    target.write_text("old", encoding="utf-8")

    res = materialize(tmp_path, Artifact.text_file(PurePosixPath("LICENSE"), "new\n"), "overwrite")
    assert res.action == "written"
    assert target.read_bytes() == b"new\n"


def test_write_leaves_no_temp_files(tmp_path) -> None:
    materialize(tmp_path, Artifact.text_file(PurePosixPath("x.txt"), "x"), "overwrite")
    materialize(tmp_path, Artifact.text_file(PurePosixPath("x.txt"), "y"), "overwrite")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["x.txt"]


def test_line_endings_are_written_verbatim(tmp_path) -> None:
    materialize(tmp_path, Artifact.text_file(PurePosixPath("crlf.md"), "a\r\nb\n"), "overwrite")
    assert (tmp_path / "crlf.md").read_bytes() == b"a\r\nb\n"


def test_write_failure_is_reported_with_path(tmp_path) -> None:
    (tmp_path / "blocker").write_text("not a dir", encoding="utf-8")

    with pytest.raises(IOFailure) as ei:
        materialize(tmp_path, Artifact.text_file(PurePosixPath("blocker/x.txt"), "x"), "keep_existing")
    assert ei.value.path == "blocker/x.txt"
    assert ei.value.operation == "write"


def test_directory_over_file_is_an_io_failure(tmp_path) -> None:
    (tmp_path / "literature").write_text("oops", encoding="utf-8")

    with pytest.raises(IOFailure) as ei:
        materialize(tmp_path, Artifact.directory(PurePosixPath("literature")), "keep_existing")
    assert ei.value.operation == "mkdir"


def test_materialize_all_reports_partial_progress(tmp_path) -> None:
    (tmp_path / "blocker").write_text("", encoding="utf-8")
    artifacts = [
        Artifact.directory(PurePosixPath("ok")),
        Artifact.text_file(PurePosixPath("ok/file.txt"), "x"),
        Artifact.text_file(PurePosixPath("blocker/y.txt"), "y"),
        Artifact.text_file(PurePosixPath("never.txt"), "z"),
    ]

    with pytest.raises(PartialFailure) as ei:
        materialize_all(tmp_path, artifacts, "keep_existing")

    handled = [str(r.relative_path) for r in ei.value.results]
    assert handled == ["ok", "ok/file.txt"]
    assert ei.value.failure.path == "blocker/y.txt"
    assert (tmp_path / "ok" / "file.txt").exists()
    assert not (tmp_path / "never.txt").exists()
