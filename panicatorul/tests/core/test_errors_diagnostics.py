# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from panicatorul.core.diagnostics import Diagnostic
from panicatorul.core.errors import ARTIFACT_NOT_FOUND, TOOLCHAIN_VERSION_MISMATCH, PanicatorulError


def test_error_is_raisable_and_structured() -> None:
	with pytest.raises(PanicatorulError) as excinfo:
		raise PanicatorulError(reason_code=ARTIFACT_NOT_FOUND, message="missing", artifact_path="t/x.bc")
	err = excinfo.value
	assert str(err) == "[artifact-not-found] missing artifact_path=t/x.bc"
	assert err.to_dict()["artifact_path"] == "t/x.bc"
	assert err.to_dict()["required"] is None


def test_diagnostic_from_version_mismatch() -> None:
	err = PanicatorulError(
		reason_code=TOOLCHAIN_VERSION_MISMATCH,
		message="LLVM version 17 is required",
		required="17",
		observed="15.0.7",
	)
	diag = Diagnostic.from_error(err, phase="toolchain")
	assert diag.format_human() == (
		"panicatorul:?:?: error: LLVM version 17 is required\n  note: required 17, found 15.0.7"
	)
	data = diag.to_dict()
	assert data["code"] == TOOLCHAIN_VERSION_MISMATCH
	assert data["phase"] == "toolchain"


def test_warning_with_file() -> None:
	diag = Diagnostic(message="source not readable", severity="warning", file="src/a.rs", line=3)
	assert diag.format_human() == "src/a.rs:3:?: warning: source not readable"
