"""Tests for builds/toolchain.py module.

The go executable is mocked via subprocess.run.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from go_lambda_builder.builds.toolchain import GoToolchain, ToolchainError


@pytest.fixture
def toolchain(tmp_path):
    """Toolchain bound to a temporary GOPATH."""
    return GoToolchain(
        gopath=tmp_path / "gopath",
        cwd=tmp_path / "gopath" / "src" / "lambda",
        goos="linux",
        goarch="amd64",
        timeout=30,
    )


class TestEnvironment:
    """Tests for GoToolchain.environment."""

    def test_gopath_mode(self, toolchain, tmp_path):
        """Should set GOPATH, target platform, and disable modules."""
        env = toolchain.environment()

        assert env["GOPATH"] == str(tmp_path / "gopath")
        assert env["GOOS"] == "linux"
        assert env["GOARCH"] == "amd64"
        assert env["GO111MODULE"] == "off"

    def test_module_mode(self, tmp_path):
        """Should enable modules when requested."""
        toolchain = GoToolchain(
            gopath=tmp_path, cwd=tmp_path, goos="linux", goarch="arm64", go_modules=True
        )

        env = toolchain.environment()

        assert env["GO111MODULE"] == "on"
        assert env["GOARCH"] == "arm64"

    def test_inherits_process_environment(self, toolchain):
        """Should keep variables such as PATH."""
        with patch.dict("os.environ", {"PATH": "/usr/local/go/bin"}):
            assert toolchain.environment()["PATH"] == "/usr/local/go/bin"


class TestRun:
    """Tests for GoToolchain.run."""

    @patch("subprocess.run")
    def test_success(self, mock_run, toolchain):
        """Should run in cwd with merged output."""
        mock_run.return_value = MagicMock(returncode=0, stdout="ok\n")

        output = toolchain.run("version")

        assert output == "ok\n"
        args, kwargs = mock_run.call_args
        assert args[0] == ["go", "version"]
        assert kwargs["cwd"] == toolchain.cwd
        assert kwargs["stderr"] == subprocess.STDOUT
        assert kwargs["timeout"] == 30
        assert kwargs["env"]["GO111MODULE"] == "off"

    @patch("subprocess.run")
    def test_nonzero_exit(self, mock_run, toolchain):
        """Should raise ToolchainError carrying the output."""
        mock_run.return_value = MagicMock(returncode=2, stdout="syntax error\n")

        with pytest.raises(ToolchainError) as exc_info:
            toolchain.run("build")

        assert exc_info.value.exit_code == 2
        assert exc_info.value.output == "syntax error\n"
        assert exc_info.value.command == "go build"

    @patch("subprocess.run")
    def test_timeout(self, mock_run, toolchain):
        """Should raise ToolchainError with timeout code."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="go", timeout=30)

        with pytest.raises(ToolchainError) as exc_info:
            toolchain.run("build")

        assert exc_info.value.code == "timeout"
        assert exc_info.value.exit_code == -1

    @patch("subprocess.run")
    def test_missing_executable(self, mock_run, toolchain):
        """Should raise ToolchainError when go cannot be executed."""
        mock_run.side_effect = FileNotFoundError("go")

        with pytest.raises(ToolchainError) as exc_info:
            toolchain.run("version")

        assert exc_info.value.code == "execution_error"


class TestCommands:
    """Tests for the go subcommand helpers."""

    @patch("subprocess.run")
    def test_get(self, mock_run, toolchain):
        """Should run `go get` with no arguments."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")

        toolchain.get()

        assert mock_run.call_args[0][0] == ["go", "get"]

    @patch("subprocess.run")
    def test_get_update(self, mock_run, toolchain):
        """Should pass -u and sources."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")

        toolchain.get([Path("a.go")], update=True)

        assert mock_run.call_args[0][0] == ["go", "get", "-u", "a.go"]

    @patch("subprocess.run")
    def test_mod_tidy(self, mock_run, toolchain):
        """Should run `go mod tidy`."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")

        toolchain.mod_tidy()

        assert mock_run.call_args[0][0] == ["go", "mod", "tidy"]

    @patch("subprocess.run")
    def test_build(self, mock_run, toolchain, tmp_path):
        """Should build sources in order into dest with ldflags."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")
        dest = tmp_path / "out" / "handler"

        toolchain.build([Path("main__lambda__go__.go"), Path("index.go")], dest)

        assert mock_run.call_args[0][0] == [
            "go",
            "build",
            "-ldflags",
            "-s -w",
            "-o",
            str(dest),
            "main__lambda__go__.go",
            "index.go",
        ]

    @patch("subprocess.run")
    def test_version(self, mock_run, toolchain):
        """Should return the trimmed `go version` line."""
        mock_run.return_value = MagicMock(
            returncode=0, stdout="go version go1.21.13 linux/amd64\n"
        )

        assert toolchain.version() == "go version go1.21.13 linux/amd64"
        assert mock_run.call_args[0][0] == ["go", "version"]
