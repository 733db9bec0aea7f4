"""Go toolchain runner.

This module handles:
- Composing `go get`, `go mod tidy`, `go build`, and `go version` commands
- Executing them with subprocess in a fixed GOPATH, cwd, and target platform
- Capturing combined output so failures carry the toolchain's diagnostics
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class ToolchainError(Exception):
    """Raised when a Go toolchain command fails."""

    def __init__(
        self,
        message: str,
        command: str,
        exit_code: int | None = None,
        output: str | None = None,
        code: str = "toolchain_error",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.output = output
        self.code = code


class GoToolchain:
    """Go toolchain bound to one working directory and target platform.

    Args:
        gopath: GOPATH for the build (the module root).
        cwd: Directory commands run in (the entrypoint's directory).
        goos: Target operating system.
        goarch: Target architecture.
        go_modules: Run in module mode (GO111MODULE=on) instead of GOPATH mode.
        go_bin: Go executable.
        ldflags: Linker flags for builds.
        timeout: Per-command timeout in seconds (None = no timeout).
    """

    def __init__(
        self,
        gopath: Path,
        cwd: Path,
        goos: str,
        goarch: str,
        go_modules: bool = False,
        go_bin: str = "go",
        ldflags: str = "-s -w",
        timeout: int | None = None,
    ) -> None:
        self.gopath = gopath
        self.cwd = cwd
        self.goos = goos
        self.goarch = goarch
        self.go_modules = go_modules
        self.go_bin = go_bin
        self.ldflags = ldflags
        self.timeout = timeout

    def environment(self) -> dict[str, str]:
        """Environment for toolchain commands."""
        env = dict(os.environ)
        env.update(
            {
                "GOPATH": str(self.gopath),
                "GOOS": self.goos,
                "GOARCH": self.goarch,
                "GO111MODULE": "on" if self.go_modules else "off",
            }
        )
        return env

    def run(self, *args: str) -> str:
        """Run a go subcommand.

        Returns:
            Combined stdout/stderr.

        Raises:
            ToolchainError: If the command fails, times out, or cannot start.
        """
        cmd = [self.go_bin, *args]
        cmd_str = shlex.join(cmd)
        logger.debug("Executing: %s (cwd=%s)", cmd_str, self.cwd)

        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                env=self.environment(),
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolchainError(
                f"`{cmd_str}` timed out after {self.timeout} seconds",
                command=cmd_str,
                exit_code=-1,
                output=e.output if isinstance(e.output, str) else None,
                code="timeout",
            ) from e
        except OSError as e:
            raise ToolchainError(
                f"Failed to execute `{cmd_str}`: {e}",
                command=cmd_str,
                code="execution_error",
            ) from e

        output = result.stdout or ""
        if result.returncode != 0:
            raise ToolchainError(
                f"`{cmd_str}` failed with exit code {result.returncode}",
                command=cmd_str,
                exit_code=result.returncode,
                output=output,
            )
        return output

    def version(self) -> str:
        """Report the toolchain version, e.g. `go version go1.21.13 linux/amd64`."""
        return self.run("version").strip()

    def get(self, src: list[Path] | None = None, update: bool = False) -> str:
        """Fetch the imports of the packages in cwd (or of src)."""
        args = ["get"]
        if update:
            args.append("-u")
        args.extend(str(s) for s in src or [])
        return self.run(*args)

    def mod_tidy(self) -> str:
        """Reconcile go.mod with the imports of the module."""
        return self.run("mod", "tidy")

    def build(self, src: list[Path], dest: Path) -> str:
        """Compile src into a single executable at dest."""
        return self.run(
            "build",
            "-ldflags",
            self.ldflags,
            "-o",
            str(dest),
            *(str(s) for s in src),
        )


__all__ = ["GoToolchain", "ToolchainError"]
