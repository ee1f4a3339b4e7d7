# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Producing and locating the bitcode artifact.

`cargo rustc ... -- --emit llvm-bc` with `-Z build-std` compiles the standard
library into the same module graph, so calls into `core::panicking` are real
call edges instead of calls to external declarations.
"""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence

from panicatorul.core.errors import ARTIFACT_NOT_FOUND, BUILD_FAILED, PanicatorulError
from panicatorul.config import DEFAULT_TOOLCHAIN


@dataclass(frozen=True)
class BuildOptions:
	package: str
	target: str
	profile: str = "release"
	toolchain: str = DEFAULT_TOOLCHAIN


def init_commands(opts: BuildOptions) -> List[List[str]]:
	"""Commands that install the pinned toolchain and emit bitcode for the package."""
	return [
		["rustup", "install", opts.toolchain],
		[
			"rustup",
			"run",
			opts.toolchain,
			"cargo",
			"rustc",
			"-p",
			opts.package,
			"--profile",
			opts.profile,
			"-Z",
			"build-std=std,core,panic_abort",
			"--target",
			opts.target,
			"--",
			"--emit",
			"llvm-bc",
		],
	]


Runner = Callable[[Sequence[str]], int]


def _spawn(argv: Sequence[str]) -> int:
	# Tool output shares stderr with the echo; stdout is reserved for results.
	return subprocess.run(list(argv), stdout=sys.stderr).returncode


def run_command(argv: Sequence[str], runner: Runner = _spawn) -> None:
	"""Echo and run one command; a non-zero exit is fatal."""
	print("Running command: " + " ".join(argv), file=sys.stderr)
	try:
		code = runner(argv)
	except FileNotFoundError as err:
		raise PanicatorulError(
			reason_code=BUILD_FAILED,
			message=f"{argv[0]} is not installed",
			detail=str(err),
		) from err
	if code != 0:
		raise PanicatorulError(
			reason_code=BUILD_FAILED,
			message=f"command exited with status {code}: {' '.join(argv)}",
		)


def do_init(opts: BuildOptions, runner: Runner = _spawn) -> None:
	for argv in init_commands(opts):
		run_command(argv, runner=runner)


def expected_artifact_path(opts: BuildOptions, root: Path = Path(".")) -> Path:
	return root / "target" / opts.target / opts.profile / "deps" / f"{opts.package}.bc"


def locate_artifact(opts: BuildOptions, root: Path = Path(".")) -> Path:
	path = expected_artifact_path(opts, root)
	if not path.exists():
		raise PanicatorulError(
			reason_code=ARTIFACT_NOT_FOUND,
			message=f"{path} does not exist",
			artifact_path=str(path),
		)
	return path


__all__ = [
	"BuildOptions",
	"init_commands",
	"run_command",
	"do_init",
	"expected_artifact_path",
	"locate_artifact",
]
