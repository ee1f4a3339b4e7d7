# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass

from llvmlite import binding as llvm  # type: ignore

from panicatorul.core.errors import TOOLCHAIN_VERSION_MISMATCH, PanicatorulError


@dataclass(frozen=True)
class ToolchainVersion:
	major: int
	minor: int
	patch: int

	def __str__(self) -> str:
		return f"{self.major}.{self.minor}.{self.patch}"


def toolchain_version() -> ToolchainVersion:
	"""Version of the LLVM that llvmlite was built against."""
	major, minor, patch = llvm.llvm_version_info[:3]
	return ToolchainVersion(major=int(major), minor=int(minor), patch=int(patch))


def check_toolchain_version(required_major: int, version: ToolchainVersion | None = None) -> ToolchainVersion:
	"""
	Require an exact LLVM major version match.

	Bitcode is only readable by the LLVM major that produced it (or newer ones
	that may still misread it), so this runs before any module is loaded.
	"""
	if version is None:
		version = toolchain_version()
	if version.major != required_major:
		raise PanicatorulError(
			reason_code=TOOLCHAIN_VERSION_MISMATCH,
			message=f"LLVM version {required_major} is required",
			required=str(required_major),
			observed=str(version),
		)
	return version


__all__ = ["ToolchainVersion", "toolchain_version", "check_toolchain_version"]
