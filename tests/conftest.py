"""Shared fixtures for build pipeline tests.

Provides a fake Go toolchain that records invocations and writes a
placeholder executable, so no Go installation is required.
"""

from pathlib import Path

import pytest

from go_lambda_builder.builds.toolchain import ToolchainError
from go_lambda_builder.config import Settings

FAKE_EXECUTABLE = b"\x7fELF-fake-handler"


class ToolchainRecorder:
    """Collects calls made by FakeToolchain instances."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
        self.instances: list["FakeToolchain"] = []
        self.failures: dict[str, ToolchainError] = {}
        self.produce_output = True
        self.executable = FAKE_EXECUTABLE

    def factory(self, **kwargs) -> "FakeToolchain":
        toolchain = FakeToolchain(self, **kwargs)
        self.instances.append(toolchain)
        return toolchain

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def fail(self, name: str, output: str = "", exit_code: int = 1) -> None:
        self.failures[name] = ToolchainError(
            f"`go {name}` failed with exit code {exit_code}",
            command=f"go {name}",
            exit_code=exit_code,
            output=output,
        )


class FakeToolchain:
    """Stand-in for GoToolchain."""

    def __init__(self, recorder: ToolchainRecorder, **kwargs) -> None:
        self.recorder = recorder
        self.kwargs = kwargs
        self.cwd: Path = kwargs["cwd"]

    def _record(self, name: str, **details) -> None:
        self.recorder.calls.append((name, details))
        if name in self.recorder.failures:
            raise self.recorder.failures[name]

    def get(self, src=None, update=False) -> str:
        self._record("get")
        return ""

    def mod_tidy(self) -> str:
        go_mod = self.cwd / "go.mod"
        self._record(
            "mod tidy",
            go_mod=go_mod.read_text() if go_mod.exists() else None,
        )
        return ""

    def build(self, src: list[Path], dest: Path) -> str:
        self._record("build", src=list(src), dest=dest)
        if self.recorder.produce_output:
            dest.write_bytes(FAKE_EXECUTABLE)
            dest.chmod(0o755)
        return ""


@pytest.fixture
def recorder() -> ToolchainRecorder:
    """Recorder whose factory creates fake toolchains."""
    return ToolchainRecorder()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with temporary directories under tmp_path."""
    return Settings(tmp_dir=tmp_path / "work")
