# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

TOOLCHAIN_VERSION_MISMATCH = "toolchain-version-mismatch"
ARTIFACT_NOT_FOUND = "artifact-not-found"
FILE_NOT_FOUND = "file-not-found"
PARSE_FAILURE = "parse-failure"
ENCODING_FAILURE = "encoding-failure"
BUILD_FAILED = "build-failed"
CONFIG_INVALID = "config-invalid"
MODULE_CLOSED = "module-closed"
ARTIFACT_UNREADABLE = "artifact-unreadable"
REPORT_WRITE_FAILED = "report-write-failed"


@dataclass(frozen=True)
class PanicatorulError(Exception):
	"""
	A structured, serializable fatal error.

	Every failure of a run is one of these; none are retried. Indirect calls and
	missing debug info are ordinary inputs and never end up here.
	"""

	reason_code: str
	message: str
	artifact_path: str | None = None
	required: str | None = None
	observed: str | None = None
	detail: str | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"artifact_path": self.artifact_path,
			"required": self.required,
			"observed": self.observed,
			"detail": self.detail,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.artifact_path:
			parts.append(f"artifact_path={self.artifact_path}")
		if self.required is not None or self.observed is not None:
			parts.append(f"required={self.required}")
			parts.append(f"observed={self.observed}")
		if self.detail:
			parts.append(f"detail={self.detail}")
		return " ".join(parts)


__all__ = [
	"PanicatorulError",
	"TOOLCHAIN_VERSION_MISMATCH",
	"ARTIFACT_NOT_FOUND",
	"FILE_NOT_FOUND",
	"PARSE_FAILURE",
	"ENCODING_FAILURE",
	"BUILD_FAILED",
	"CONFIG_INVALID",
	"MODULE_CLOSED",
	"ARTIFACT_UNREADABLE",
	"REPORT_WRITE_FAILED",
]
