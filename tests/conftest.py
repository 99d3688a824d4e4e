"""Pytest configuration and shared fixtures."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def pom_xml(version: str | None = "1.0.0", name: str = "demo", namespaced: bool = True) -> str:
    """Return a minimal Maven POM, optionally without a <version> element."""
    xmlns = ' xmlns="http://maven.apache.org/POM/4.0.0"' if namespaced else ""
    version_line = f"  <version>{version}</version>\n" if version is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<project{xmlns}>\n"
        "  <modelVersion>4.0.0</modelVersion>\n"
        "  <parent>\n"
        "    <groupId>org.example</groupId>\n"
        "    <artifactId>parent</artifactId>\n"
        "    <version>9.9.9</version>\n"
        "  </parent>\n"
        "  <groupId>org.example</groupId>\n"
        f"  <artifactId>{name}</artifactId>\n"
        f"{version_line}"
        "</project>\n"
    )


def git(repo: Path, *args: str) -> str:
    """Run a git command in ``repo`` and return stdout, failing the test on error."""
    result = subprocess.run(
        ["git", *args],
        cwd=str(repo),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def commit_all(repo: Path, message: str = "commit") -> None:
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep user config files and BUMPCHECK_* variables out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")

    for name in list(os.environ):
        if name.startswith("BUMPCHECK_"):
            monkeypatch.delenv(name)
    return home


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a temporary git repository for testing.

    Yields:
        Path to temporary git repository
    """
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    git(repo_path, "init", "-q")
    git(repo_path, "config", "user.email", "test@example.com")
    git(repo_path, "config", "user.name", "Test User")
    git(repo_path, "config", "commit.gpgsign", "false")

    yield repo_path


@pytest.fixture
def maven_repo(temp_git_repo):
    """Git repository with a committed pom.xml at version 1.0.0 and a README."""
    (temp_git_repo / "pom.xml").write_text(pom_xml("1.0.0"))
    (temp_git_repo / "README.md").write_text("# demo\n")
    commit_all(temp_git_repo, "initial")
    return temp_git_repo


@pytest.fixture
def plain_dir(tmp_path, monkeypatch):
    """Directory that git will not treat as part of any repository."""
    directory = tmp_path / "plain"
    directory.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    return directory
