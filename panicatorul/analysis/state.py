# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Set

from panicatorul.ir.protocol import Function
from .line_annotator import FileReport


@dataclass
class AnalysisState:
	"""
	Everything one analysis run owns; discarded when the run ends.

	memo: Function -> final classification (never changes once written)
	in_progress: functions whose bodies are being traversed right now
	files: filename -> FileReport
	"""

	memo: Dict[Function, bool] = field(default_factory=dict)
	in_progress: Set[Function] = field(default_factory=set)
	files: Dict[str, FileReport] = field(default_factory=dict)


__all__ = ["AnalysisState"]
