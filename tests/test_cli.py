import pytest
from typer.testing import CliRunner

from bumpcheck.checker import CheckOutcome, CheckResult
from bumpcheck.cli import app, exit_code_for, main

from conftest import commit_all, pom_xml, requires_git


@pytest.fixture
def runner():
    return CliRunner()


def test_cli_help(runner):
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "check" in result.output


def test_main_help_exits_zero():
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_exit_code_is_worst_outcome(tmp_path):
    results = [
        CheckResult(CheckOutcome.VERSION_BUMPED, tmp_path),
        CheckResult(CheckOutcome.VERSION_UNCHANGED, tmp_path),
    ]
    assert exit_code_for(results) == 1
    assert exit_code_for([]) == 0
    assert exit_code_for(results + [CheckResult(CheckOutcome.INTERNAL_ERROR, tmp_path)]) == 2


def test_missing_git_exits_2(runner, tmp_path):
    result = runner.invoke(app, ["check", str(tmp_path), "--git", "no-such-git-binary-4b1e"])
    assert result.exit_code == 2
    assert "tool_not_found" in result.output


def test_invalid_log_level_exits_2(runner, tmp_path):
    result = runner.invoke(app, ["check", str(tmp_path), "--log-level", "loud"])
    assert result.exit_code == 2
    assert "invalid configuration" in result.output


def test_badly_typed_config_file_exits_2(runner, tmp_path):
    config_file = tmp_path / "bumpcheck.yml"
    config_file.write_text("process_timeout_seconds: abc\n")
    result = runner.invoke(app, ["check", str(tmp_path), "--config", str(config_file)])
    assert result.exit_code == 2
    assert "invalid configuration" in result.output


@requires_git
class TestCheckCommand:
    def test_bumped_version_exits_0(self, runner, maven_repo):
        (maven_repo / "pom.xml").write_text(pom_xml("1.0.1"))
        result = runner.invoke(app, ["check", str(maven_repo)])
        assert result.exit_code == 0
        assert "Up to date (1.0.0 -> 1.0.1)" in result.output

    def test_forgotten_bump_exits_1(self, runner, maven_repo):
        (maven_repo / "pom.xml").write_text(pom_xml("1.0.0", name="renamed"))
        result = runner.invoke(app, ["check", str(maven_repo)])
        assert result.exit_code == 1
        assert "Version not updated (1.0.0)" in result.output

    def test_multiple_directories(self, runner, maven_repo, plain_dir):
        (maven_repo / "README.md").write_text("# changed\n")
        result = runner.invoke(app, ["check", str(plain_dir), str(maven_repo)])
        assert result.exit_code == 1
        assert "is not a git repository" in result.output
        assert "Version not updated" in result.output

    def test_custom_descriptor_and_revision(self, runner, maven_repo):
        (maven_repo / "module.xml").write_text("<module><rev>1</rev></module>")
        commit_all(maven_repo, "module")
        (maven_repo / "module.xml").write_text("<module><rev>2</rev></module>")
        result = runner.invoke(
            app, ["check", str(maven_repo), "--descriptor", "module.xml", "--field", "rev", "--revision", "HEAD"]
        )
        assert result.exit_code == 0
        assert "Up to date (1 -> 2)" in result.output


@requires_git
def test_git_version(runner):
    result = runner.invoke(app, ["git-version"])
    assert result.exit_code == 0
    assert "git version" in result.output


def test_git_version_missing_binary(runner):
    result = runner.invoke(app, ["git-version", "--git", "no-such-git-binary-4b1e"])
    assert result.exit_code == 2
