"""
Common diagnostic structure for the CLI and report writer.

Fatal errors are PanicatorulError; diagnostics are what gets printed, both for
those and for non-fatal warnings (a source file named in debug info that is not
on disk, for instance).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import PanicatorulError


@dataclass
class Diagnostic:
	"""Represents a tool diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	# Which part of the run produced it: config, toolchain, build, load,
	# analysis, report.
	phase: str | None = None
	severity: str = "error"
	file: str | None = None
	line: int | None = None
	notes: list[str] = field(default_factory=list)

	@classmethod
	def from_error(cls, err: PanicatorulError, phase: str | None = None) -> "Diagnostic":
		notes: list[str] = []
		if err.required is not None or err.observed is not None:
			notes.append(f"required {err.required}, found {err.observed}")
		if err.detail:
			notes.append(err.detail)
		return cls(
			message=err.message,
			code=err.reason_code,
			phase=phase,
			severity="error",
			file=err.artifact_path,
			notes=notes,
		)

	def format_human(self) -> str:
		file = self.file if self.file is not None else "panicatorul"
		line = self.line if self.line is not None else "?"
		text = f"{file}:{line}:?: {self.severity}: {self.message}"
		for note in self.notes:
			text += f"\n  note: {note}"
		return text

	def to_dict(self) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.file,
			"line": self.line,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
