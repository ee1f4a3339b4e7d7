# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-line outcome table built from classified call sites.

Every call instruction the analysis classifies is attributed to each of its
source locations (direct and inlined-at). Merge rule for one (file, line):

  Panic is sticky: once set it is never changed.
  Otherwise the line becomes Panic or NoPanic according to the call.

Lines never touched by a call stay NotInBinary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List

from panicatorul.core.source_location import SourceLocation


class LineStatus(Enum):
	NOT_IN_BINARY = "not-in-binary"
	NO_PANIC = "no-panic"
	PANIC = "panic"


@dataclass
class FileReport:
	"""
	Line table of one source file.

	`lines[i]` is the status of 1-based line `i`; index 0 is filler and is
	never written. The table grows to the highest line observed.
	"""

	filename: str
	lines: List[LineStatus] = field(default_factory=list)

	def status(self, line: int) -> LineStatus:
		"""Status of `line`; lines past the table are NotInBinary."""
		if 0 <= line < len(self.lines):
			return self.lines[line]
		return LineStatus.NOT_IN_BINARY

	@property
	def max_line(self) -> int:
		return max(len(self.lines) - 1, 0)

	def count(self, status: LineStatus) -> int:
		return sum(1 for s in self.lines if s is status)

	def set_line(self, line: int, is_panicky: bool) -> None:
		if line >= len(self.lines):
			self.lines.extend([LineStatus.NOT_IN_BINARY] * (line + 1 - len(self.lines)))
		if self.lines[line] is LineStatus.PANIC:
			return
		self.lines[line] = LineStatus.PANIC if is_panicky else LineStatus.NO_PANIC


class LineAnnotator:
	"""Owns the filename -> FileReport table of one analysis run."""

	def __init__(self, files: Dict[str, FileReport] | None = None) -> None:
		self.files: Dict[str, FileReport] = files if files is not None else {}

	def annotate(self, locations: Iterable[SourceLocation], is_panicky: bool) -> None:
		"""Apply one classified call to each of its locations independently."""
		for loc in locations:
			self.annotate_location(loc, is_panicky)

	def annotate_location(self, loc: SourceLocation, is_panicky: bool) -> None:
		# Line 0 is compiler-generated code with no source line to blame;
		# together with an empty filename it is "no location" at all.
		if loc.is_unknown() or loc.line <= 0:
			return
		report = self.files.get(loc.filename)
		if report is None:
			report = FileReport(filename=loc.filename)
			self.files[loc.filename] = report
		report.set_line(loc.line, is_panicky)

	def __call__(self, locations: Iterable[SourceLocation], is_panicky: bool) -> None:
		self.annotate(locations, is_panicky)


__all__ = ["LineStatus", "FileReport", "LineAnnotator"]
