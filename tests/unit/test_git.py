"""Unit tests for git metadata discovery."""

import subprocess
from pathlib import Path

import pytest

from gouml.utils import git
from gouml.utils.git import get_branch, get_commit_id


class TestCommitId:
    """Tests for get_commit_id."""

    def test_github_sha_wins(self) -> None:
        """Test GITHUB_SHA is used when present."""
        assert get_commit_id(env={"GITHUB_SHA": "abc123"}) == "abc123"

    def test_falls_back_to_git(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test git rev-parse HEAD is used without CI variables."""
        calls: list[list[str]] = []

        def fake_run(args: list[str], cwd: Path | None = None) -> str | None:
            calls.append(args)
            return "def456"

        monkeypatch.setattr(git, "_run_git", fake_run)

        assert get_commit_id(env={}) == "def456"
        assert calls == [["rev-parse", "HEAD"]]


class TestBranch:
    """Tests for get_branch."""

    def test_ref_name_wins(self) -> None:
        """Test GITHUB_REF_NAME has priority."""
        env = {"GITHUB_REF_NAME": "main", "GITHUB_HEAD_REF": "feature"}

        assert get_branch(env=env) == "main"

    def test_head_ref(self) -> None:
        """Test GITHUB_HEAD_REF is used for pull requests."""
        assert get_branch(env={"GITHUB_REF_NAME": "", "GITHUB_HEAD_REF": "feature"}) == "feature"

    def test_falls_back_to_git(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test git rev-parse --abbrev-ref HEAD is used without CI variables."""
        monkeypatch.setattr(git, "_run_git", lambda args, cwd=None: "develop")

        assert get_branch(env={}) == "develop"


class TestRunGit:
    """Tests for the git subprocess wrapper."""

    def test_missing_git_binary(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing git executable degrades to None."""

        def raise_not_found(*args: object, **kwargs: object) -> None:
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", raise_not_found)

        assert git._run_git(["rev-parse", "HEAD"]) is None

    def test_non_zero_exit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a failing git command degrades to None."""
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda *a, **k: subprocess.CompletedProcess(a, 128, stdout="", stderr="fatal"),
        )

        assert git._run_git(["rev-parse", "HEAD"]) is None

    def test_output_stripped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test stdout is stripped of the trailing newline."""
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda *a, **k: subprocess.CompletedProcess(a, 0, stdout="abc\n", stderr=""),
        )

        assert git._run_git(["rev-parse", "HEAD"]) == "abc"
