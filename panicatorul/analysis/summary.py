# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from .line_annotator import FileReport, LineStatus

Band = Literal["good", "warning", "bad"]

GOOD_THRESHOLD = 80.0
WARNING_THRESHOLD = 50.0


@dataclass(frozen=True)
class FileSummary:
	"""
	Clean-line statistics of one FileReport.

	NotInBinary lines count as clean: they are not evidence of a panic.
	"""

	clean_percent: float
	clean_lines: int
	total_lines: int
	panic_lines: int

	@property
	def band(self) -> Band:
		return band(self.clean_percent)

	@property
	def percent_text(self) -> str:
		return format_percent(self.clean_percent)

	def to_dict(self) -> dict[str, Any]:
		return {
			"clean_percent": round(self.clean_percent, 2),
			"clean_lines": self.clean_lines,
			"total_lines": self.total_lines,
			"panic_lines": self.panic_lines,
			"band": self.band,
		}


def summarize(report: FileReport) -> FileSummary:
	total = len(report.lines)
	panic = report.count(LineStatus.PANIC)
	clean = total - panic
	# An empty table has no evidence of a panic anywhere.
	percent = clean / total * 100.0 if total else 100.0
	return FileSummary(clean_percent=percent, clean_lines=clean, total_lines=total, panic_lines=panic)


def band(clean_percent: float) -> Band:
	"""Lower bound of each band is inclusive: 80.0 is good, 50.0 is warning."""
	if clean_percent >= GOOD_THRESHOLD:
		return "good"
	if clean_percent >= WARNING_THRESHOLD:
		return "warning"
	return "bad"


def format_percent(clean_percent: float) -> str:
	return f"{clean_percent:.2f}"


__all__ = [
	"Band",
	"FileSummary",
	"summarize",
	"band",
	"format_percent",
	"GOOD_THRESHOLD",
	"WARNING_THRESHOLD",
]
