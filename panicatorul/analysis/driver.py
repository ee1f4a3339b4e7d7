# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
One analysis run over a module.

Every function of the module is classified once, in module order; call sites
are attributed to source lines while their enclosing bodies are traversed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from panicatorul.ir.protocol import Module
from .line_annotator import FileReport, LineAnnotator
from .panic_roots import PanicRootClassifier
from .reachability import ReachabilityAnalyzer
from .state import AnalysisState
from .summary import FileSummary, summarize


@dataclass
class AnalysisResult:
	files: Dict[str, FileReport]
	function_count: int
	panicky_function_count: int
	panic_root_count: int
	panicky_function_names: List[str] = field(default_factory=list)

	def summaries(self) -> Dict[str, FileSummary]:
		return {name: summarize(report) for name, report in self.files.items()}

	def to_dict(self) -> dict[str, Any]:
		summaries = self.summaries()
		return {
			"function_count": self.function_count,
			"panicky_function_count": self.panicky_function_count,
			"panic_root_count": self.panic_root_count,
			"file_count": len(self.files),
			"files": {name: summaries[name].to_dict() for name in sorted(summaries)},
		}


def analyze_module(
	module: Module,
	classifier: PanicRootClassifier | None = None,
	state: AnalysisState | None = None,
) -> AnalysisResult:
	"""Classify every function of `module` and build the per-file line tables."""
	state = state if state is not None else AnalysisState()
	annotator = LineAnnotator(state.files)
	analyzer = ReachabilityAnalyzer(classifier=classifier, observer=annotator, state=state)

	function_count = 0
	panicky: List[str] = []
	roots = 0
	for fn in module.functions():
		function_count += 1
		if analyzer.classifier.is_panic_root(fn):
			roots += 1
		if analyzer.is_panicky(fn):
			panicky.append(fn.name())

	return AnalysisResult(
		files=state.files,
		function_count=function_count,
		panicky_function_count=len(panicky),
		panic_root_count=roots,
		panicky_function_names=panicky,
	)


__all__ = ["AnalysisResult", "analyze_module"]
