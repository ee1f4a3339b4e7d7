# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from panicatorul.core.errors import TOOLCHAIN_VERSION_MISMATCH, PanicatorulError
from panicatorul.ir.version import ToolchainVersion, check_toolchain_version, toolchain_version


def test_matching_major_passes() -> None:
	v = ToolchainVersion(17, 0, 6)
	assert check_toolchain_version(17, v) is v


def test_mismatch_reports_required_and_observed() -> None:
	with pytest.raises(PanicatorulError) as excinfo:
		check_toolchain_version(17, ToolchainVersion(16, 0, 6))
	err = excinfo.value
	assert err.reason_code == TOOLCHAIN_VERSION_MISMATCH
	assert err.message == "LLVM version 17 is required"
	assert err.required == "17"
	assert err.observed == "16.0.6"


def test_bound_llvm_version_is_checked_by_default() -> None:
	current = toolchain_version()
	assert current.major > 0
	assert check_toolchain_version(current.major) == current
	with pytest.raises(PanicatorulError):
		check_toolchain_version(current.major + 1)
