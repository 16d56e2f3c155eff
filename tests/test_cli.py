import pytest
from typer.testing import CliRunner

from research_scaffold.cli import app

runner = CliRunner()


@pytest.fixture
def in_tmp(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_init_then_rerun(in_tmp):
    result = runner.invoke(app, ["init", "demo", "--study", "pilot"])
    assert result.exit_code == 0, result.output
    assert "Project 'demo' created successfully!" in result.output
    assert (in_tmp / "demo" / "demo.Rproj").is_file()

    again = runner.invoke(app, ["init", "demo", "--study", "pilot"])
    assert again.exit_code == 0, again.output
    assert "Nothing to do" in again.output


def test_add_study(in_tmp):
    runner.invoke(app, ["init", "demo", "-s", "pilot", "-m", "scripted"])
    result = runner.invoke(app, ["add-study", "followup", "--path", "demo", "--no-git"])
    assert result.exit_code == 0, result.output
    assert "Study 'followup' added in scripted mode" in result.output
    assert (in_tmp / "demo" / "studies" / "followup" / "code" / "00-run-all.R").is_file()


def test_add_existing_study_fails(in_tmp):
    runner.invoke(app, ["init", "demo", "-s", "pilot"])
    result = runner.invoke(app, ["add-study", "pilot", "-p", "demo"])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_add_study_outside_project_fails(in_tmp):
    result = runner.invoke(app, ["add-study", "followup"])
    assert result.exit_code == 1
    assert ".Rproj" in result.output


def test_bad_mode_is_a_usage_error(in_tmp):
    result = runner.invoke(app, ["init", "demo", "--mode", "notebook"])
    assert result.exit_code == 2
    assert not (in_tmp / "demo").exists()


def test_reserved_study_name(in_tmp):
    result = runner.invoke(app, ["init", "demo", "--study", "writeup"])
    assert result.exit_code == 1
    assert "reserved" in result.output


def test_add_study_resume_flag(in_tmp):
    runner.invoke(app, ["init", "demo", "-s", "pilot"])
    (in_tmp / "demo" / "studies" / "followup" / "code").mkdir(parents=True)

    rejected = runner.invoke(app, ["add-study", "followup", "-p", "demo"])
    assert rejected.exit_code == 1

    result = runner.invoke(app, ["add-study", "followup", "-p", "demo", "--resume", "--no-git"])
    assert result.exit_code == 0, result.output
    assert (in_tmp / "demo" / "studies" / "followup" / "code" / "02-analysis.qmd").is_file()
