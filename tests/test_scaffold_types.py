from pathlib import PurePosixPath

from research_scaffold.scaffold.types import (
    StudyUnit,
    parse_mode,
    parse_overwrite_policy,
)


def test_parse_mode():
    assert parse_mode(" Literate ") == "literate"
    assert parse_mode("scripted") == "scripted"
    assert parse_mode("notebook") is None
    assert parse_mode(None) is None


def test_overwrite_policy_parsing():
    assert parse_overwrite_policy(True) == "overwrite"
    assert parse_overwrite_policy(False) == "keep_existing"
    assert parse_overwrite_policy("keep-existing") == "keep_existing"
    assert parse_overwrite_policy("sometimes") is None


def test_study_layout_paths():
    study = StudyUnit("pilot", "scripted")
    assert study.relative_root == PurePosixPath("studies/pilot")
    assert study.code_ext == ".R"
    assert study.layout.data_readme == PurePosixPath("studies/pilot/data/README.md")
    dirs = [str(d) for d in study.layout.directories()]
    assert dirs[0] == "studies/pilot"
    assert "studies/pilot/outputs/fitted_models" in dirs
    assert len(dirs) == len(set(dirs)) == 11
