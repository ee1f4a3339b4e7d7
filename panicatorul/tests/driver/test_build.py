# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import pytest

from panicatorul.build import (
	BuildOptions,
	do_init,
	expected_artifact_path,
	init_commands,
	locate_artifact,
	run_command,
)
from panicatorul.core.errors import ARTIFACT_NOT_FOUND, BUILD_FAILED, PanicatorulError

_OPTS = BuildOptions(package="mycrate", target="x86_64-unknown-linux-gnu")


def test_init_commands_pin_toolchain_and_build_std() -> None:
	install, build = init_commands(_OPTS)
	assert install == ["rustup", "install", "nightly-2023-09-17"]
	assert build[:4] == ["rustup", "run", "nightly-2023-09-17", "cargo"]
	assert build[4:] == [
		"rustc",
		"-p",
		"mycrate",
		"--profile",
		"release",
		"-Z",
		"build-std=std,core,panic_abort",
		"--target",
		"x86_64-unknown-linux-gnu",
		"--",
		"--emit",
		"llvm-bc",
	]


def test_do_init_runs_commands_in_order(capsys: pytest.CaptureFixture[str]) -> None:
	ran: list[list[str]] = []

	def runner(argv: Sequence[str]) -> int:
		ran.append(list(argv))
		return 0

	do_init(_OPTS, runner=runner)
	assert ran == init_commands(_OPTS)
	assert capsys.readouterr().err.startswith("Running command: rustup install nightly-2023-09-17\n")


def test_failing_command_stops_the_run() -> None:
	ran: list[list[str]] = []

	def runner(argv: Sequence[str]) -> int:
		ran.append(list(argv))
		return 101

	with pytest.raises(PanicatorulError) as excinfo:
		do_init(_OPTS, runner=runner)
	assert excinfo.value.reason_code == BUILD_FAILED
	assert "status 101" in excinfo.value.message
	assert len(ran) == 1


def test_missing_executable_is_build_failure() -> None:
	def runner(argv: Sequence[str]) -> int:
		raise FileNotFoundError(2, "No such file or directory", argv[0])

	with pytest.raises(PanicatorulError) as excinfo:
		run_command(["rustup", "--version"], runner=runner)
	assert excinfo.value.reason_code == BUILD_FAILED
	assert excinfo.value.message == "rustup is not installed"


def test_artifact_path_layout(tmp_path: Path) -> None:
	opts = BuildOptions(package="mycrate", target="thumbv6m-none-eabi", profile="dev")
	assert expected_artifact_path(opts, tmp_path) == tmp_path / "target" / "thumbv6m-none-eabi" / "dev" / "deps" / "mycrate.bc"


def test_locate_artifact(tmp_path: Path) -> None:
	with pytest.raises(PanicatorulError) as excinfo:
		locate_artifact(_OPTS, tmp_path)
	assert excinfo.value.reason_code == ARTIFACT_NOT_FOUND
	assert excinfo.value.artifact_path == str(expected_artifact_path(_OPTS, tmp_path))

	path = expected_artifact_path(_OPTS, tmp_path)
	path.parent.mkdir(parents=True)
	path.write_bytes(b"BC")
	assert locate_artifact(_OPTS, tmp_path) == path


def test_spawned_tools_write_to_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
	seen: dict = {}

	class _Done:
		returncode = 0

	def fake_run(argv, **kwargs):
		seen["argv"] = argv
		seen.update(kwargs)
		return _Done()

	monkeypatch.setattr("panicatorul.build.subprocess.run", fake_run)
	run_command(["rustup", "--version"])
	assert seen["argv"] == ["rustup", "--version"]
	assert seen["stdout"] is sys.stderr
