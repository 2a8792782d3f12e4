#!/usr/bin/env python3
"""
Tests for the interactive session, the CLI, configuration and logging setup.
"""

import io
import logging
import shutil
import subprocess
from unittest.mock import Mock

import pytest
from rich.console import Console
from typer.testing import CliRunner

import gitlog_tool.cli as cli_mod
import gitlog_tool.session as session_mod
from gitlog_tool import __version__
from gitlog_tool.ascii_art import print_banner, render_block_text
from gitlog_tool.cli import app
from gitlog_tool.config import Settings
from gitlog_tool.errors import ExternalToolFailure, InvalidRepository
from gitlog_tool.logging_config import configure_logging
from gitlog_tool.report import Report
from gitlog_tool.session import Session, SessionState, validate_repository
from gitlog_tool.tools.git_tools import (LATEST_COMMIT_ARGS, STAGED_DIFF_ARGS, STATUS_ARGS,
                                         UNSTAGED_DIFF_ARGS, GitClient)
from gitlog_tool.tools.shell import CommandResult

OUTPUTS = {
    LATEST_COMMIT_ARGS: "abc123_Fix bug #42",
    STATUS_ARGS: "M  a.txt\n?? b.txt",
    STAGED_DIFF_ARGS: "M\ta.txt",
    UNSTAGED_DIFF_ARGS: "",
}


@pytest.fixture
def repo(tmp_path):
    (tmp_path / ".git").mkdir()
    return tmp_path


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None)


def use_fake_git(monkeypatch, fail=None):
    async def runner(command, args, timeout=None, cwd=None, env=None):
        if fail is not None:
            raise fail
        return CommandResult(stdout=OUTPUTS[tuple(args)])

    monkeypatch.setattr(session_mod, "GitClient", lambda repo, **kwargs: GitClient(repo, runner=runner))


def saved_reports(repo):
    logs = repo / "Logs"
    return sorted(logs.glob("GitLog_*.txt")) if logs.exists() else []


class TestValidateRepository:
    """Test repository path validation."""

    def test_valid_repository(self, repo):
        assert validate_repository(str(repo)) == repo

    @pytest.mark.parametrize("path", ["", "   "])
    def test_blank_path(self, path):
        with pytest.raises(InvalidRepository) as info:
            validate_repository(path)
        assert "Invalid path" in info.value.reason

    def test_missing_directory(self, tmp_path):
        with pytest.raises(InvalidRepository):
            validate_repository(str(tmp_path / "nope"))

    def test_directory_without_git(self, tmp_path):
        with pytest.raises(InvalidRepository) as info:
            validate_repository(str(tmp_path))
        assert "No Git repository" in info.value.reason

    def test_git_file_is_accepted(self, tmp_path):
        (tmp_path / ".git").write_text("gitdir: ../elsewhere\n")
        assert validate_repository(str(tmp_path)) == tmp_path


class TestSession:
    """Test the interactive loop with scripted answers."""

    def test_generate_save_and_exit(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch)
        ask = Mock(side_effect=[str(repo), "", "4"])
        session = Session(Settings(), console=console, ask=ask)
        session.run()

        reports = saved_reports(repo)
        assert len(reports) == 1
        assert reports[0].name.endswith("_abc123_Fix-bug-#42.txt")
        assert reports[0].read_text(encoding="utf-8").startswith("=== Staged Changes ===\nM  a.txt\n")
        assert session.state is SessionState.DONE
        output = console.file.getvalue()
        assert "Git log generated successfully" in output
        assert "Goodbye" in output

    def test_discard_does_not_write(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch)
        # Without a saved file the menu is: again, switch, exit
        ask = Mock(side_effect=[str(repo), "n", "3"])
        Session(Settings(), console=console, ask=ask).run()
        assert saved_reports(repo) == []
        assert "Report discarded" in console.file.getvalue()

    def test_confirm_save_disabled(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch)
        ask = Mock(side_effect=["4"])
        Session(Settings(confirm_save=False), console=console, ask=ask, repo=str(repo)).run()
        assert len(saved_reports(repo)) == 1

    def test_open_generated_file(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch)
        launcher = Mock(return_value=0)
        ask = Mock(side_effect=[str(repo), "y", "1", "4"])
        Session(Settings(), console=console, ask=ask, launcher=launcher).run()
        launcher.assert_called_once_with(str(saved_reports(repo)[0]))

    def test_open_failure_is_reported(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch)
        launcher = Mock(side_effect=OSError("no viewer"))
        ask = Mock(side_effect=[str(repo), "y", "1", "4"])
        Session(Settings(), console=console, ask=ask, launcher=launcher).run()
        assert "Could not open the file" in console.file.getvalue()

    def test_run_again_and_switch(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch)
        ask = Mock(side_effect=[str(repo), "n", "1", "n", "2", "exit"])
        session = Session(Settings(), console=console, ask=ask)
        session.run()
        assert ask.call_count == 6
        assert session.state is SessionState.DONE

    def test_invalid_path_prompts_again(self, tmp_path, console):
        ask = Mock(side_effect=[str(tmp_path / "missing"), str(tmp_path), "EXIT"])
        Session(Settings(), console=console, ask=ask).run()
        output = console.file.getvalue()
        assert "Invalid path" in output
        assert "No Git repository found" in output
        assert ask.call_count == 3

    def test_failure_then_back_to_path_prompt(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch, fail=ExternalToolFailure("git", ["log"], 128, "fatal: bad [HEAD]"))
        ask = Mock(side_effect=[str(repo), "", "exit"])
        Session(Settings(), console=console, ask=ask).run()
        output = console.file.getvalue()
        assert "Could not generate the git log" in output
        assert "fatal: bad [HEAD]" in output
        assert saved_reports(repo) == []

    def test_failure_retry(self, monkeypatch, repo, console):
        use_fake_git(monkeypatch, fail=ExternalToolFailure("git", ["log"], 128, "fatal"))
        ask = Mock(side_effect=[str(repo), "y", "n", "exit"])
        Session(Settings(), console=console, ask=ask).run()
        assert console.file.getvalue().count("Could not generate the git log") == 2

    def test_states_out_of_order_raise(self, console):
        session = Session(Settings(), console=console, ask=Mock())
        with pytest.raises(RuntimeError):
            session._run_report()
        with pytest.raises(RuntimeError):
            session._preview()

    def test_eof_ends_session(self, console):
        Session(Settings(), console=console, ask=Mock(side_effect=EOFError)).run()
        assert "Goodbye" in console.file.getvalue()


class TestConfig:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("GITLOG_GIT", "GITLOG_TIMEOUT", "GITLOG_LOG_FILE", "GITLOG_LOG_LEVEL", "GITLOG_CONFIRM_SAVE"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings == Settings()
        assert settings.timeout == 10.0

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("GITLOG_GIT", "/usr/local/bin/git")
        monkeypatch.setenv("GITLOG_TIMEOUT", "2.5")
        monkeypatch.setenv("GITLOG_LOG_LEVEL", "debug")
        monkeypatch.setenv("GITLOG_CONFIRM_SAVE", "no")
        settings = Settings.from_env()
        assert settings.git == "/usr/local/bin/git"
        assert settings.timeout == 2.5
        assert settings.log_level == "DEBUG"
        assert settings.confirm_save is False

    @pytest.mark.parametrize("raw", ["soon", "-1", "0"])
    def test_bad_timeout_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("GITLOG_TIMEOUT", raw)
        assert Settings.from_env().timeout == 10.0


class TestLoggingAndBanner:
    """Test logging setup and the start-up banner."""

    def test_configure_logging_is_idempotent(self, tmp_path):
        log_file = tmp_path / "app.log"
        configure_logging("INFO", str(log_file))
        root = configure_logging("DEBUG", str(log_file))
        ours = [h for h in root.handlers if getattr(h, "_gitlog_handler", False)]
        assert len(ours) == 2
        logging.getLogger("gitlog_tool.test").info("written to file")
        for handler in ours:
            handler.flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")
        configure_logging("INFO", None)

    def test_unwritable_log_file_falls_back_to_console(self, tmp_path):
        root = configure_logging("INFO", str(tmp_path / "missing" / "app.log"))
        ours = [h for h in root.handlers if getattr(h, "_gitlog_handler", False)]
        assert len(ours) == 1
        assert not isinstance(ours[0], logging.FileHandler)
        configure_logging("INFO", None)

    def test_banner(self, console):
        rows = render_block_text("GIT LOG")
        assert len(rows) == 6
        print_banner(console)
        assert f"v{__version__}" in console.file.getvalue()


class TestCli:
    """Test the typer commands."""

    def test_version(self):
        result = CliRunner().invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_report_rejects_non_repository(self, tmp_path):
        result = CliRunner().invoke(app, ["report", "--repo", str(tmp_path),
                                          "--log-file", str(tmp_path / "app.log")])
        assert result.exit_code == 1
        assert "No Git repository" in result.output

    def test_report_survives_unwritable_log_file(self, monkeypatch, repo):
        async def fake_generate(path, **kwargs):
            return Report(path / "GitLog_test.txt", "content\n")

        monkeypatch.setattr(cli_mod, "generate_report", fake_generate)
        bad_log = repo / "no" / "such" / "dir" / "app.log"
        result = CliRunner().invoke(app, ["report", "--repo", str(repo), "--log-file", str(bad_log)])
        assert result.exit_code == 0, result.output
        assert (repo / "GitLog_test.txt").read_text(encoding="utf-8") == "content\n"
        assert not bad_log.exists()

    def test_run_survives_unwritable_log_file(self, tmp_path):
        bad_log = tmp_path / "no" / "such" / "dir" / "app.log"
        result = CliRunner().invoke(app, ["run", "--no-banner", "--log-file", str(bad_log)], input="exit\n")
        assert result.exit_code == 0, result.output
        assert "Goodbye" in result.output
        assert "Unexpected error occurred" not in result.output

    def test_report_unexpected_error(self, monkeypatch, repo, tmp_path):
        async def broken_generate(path, **kwargs):
            raise ValueError("something odd")

        monkeypatch.setattr(cli_mod, "generate_report", broken_generate)
        result = CliRunner().invoke(app, ["report", "--repo", str(repo),
                                          "--log-file", str(tmp_path / "app.log")])
        assert result.exit_code == 1
        assert "Unexpected error occurred. Check logs for details." in result.output
        assert "something odd" in (tmp_path / "app.log").read_text(encoding="utf-8")

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_report_writes_file(self, tmp_path):
        def git(*args):
            subprocess.run(["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
                           cwd=tmp_path, check=True, capture_output=True)

        git("init", "-q")
        (tmp_path / "a.txt").write_text("one\n")
        git("add", "a.txt")
        git("commit", "-q", "-m", "Initial commit")

        result = CliRunner().invoke(app, ["report", "--repo", str(tmp_path),
                                          "--log-file", str(tmp_path.parent / "gitlog-test.log")])
        assert result.exit_code == 0, result.output
        reports = saved_reports(tmp_path)
        assert len(reports) == 1
        assert reports[0].name.endswith("_Initial-commit.txt")
        assert "No staged changes." in reports[0].read_text(encoding="utf-8")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
