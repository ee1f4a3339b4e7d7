# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source locations attached to compiled instructions.

A call instruction can carry two attribution points: where the call itself was
written (direct) and, when it was inlined, the call site in the outer function
that caused the inlining (inlined-at). Both are recorded independently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class SourceLocation:
	"""(filename, 1-based line) as recorded in debug info."""

	filename: str
	line: int
	inlined: bool = False  # origin: False = direct, True = inlined-at parent

	def is_unknown(self) -> bool:
		"""Empty filename and line 0 is how debug info spells "no location"."""
		return self.filename == "" and self.line == 0


@dataclass(frozen=True)
class DebugLocations:
	"""Direct location plus the optional inlined-at parent of one instruction."""

	direct: Optional[SourceLocation] = None
	inlined_at: Optional[SourceLocation] = None

	def __iter__(self) -> Iterator[SourceLocation]:
		if self.direct is not None:
			yield self.direct
		if self.inlined_at is not None:
			yield self.inlined_at

	def __bool__(self) -> bool:
		return self.direct is not None or self.inlined_at is not None


NO_LOCATIONS = DebugLocations()


__all__ = ["SourceLocation", "DebugLocations", "NO_LOCATIONS"]
