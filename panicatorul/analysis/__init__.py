# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Analysis package: panic reachability and source-line annotation.

Pipeline placement:
  ir (module) → analysis (this package) → report

Public API:
  - PanicRootClassifier / is_panic_root: name-prefix panic roots
  - ReachabilityAnalyzer: memoized, cycle-safe is_panicky
  - LineAnnotator / FileReport / LineStatus: per-line outcome table
  - summarize / band: per-file clean-line statistics
  - analyze_module / AnalysisResult: one full run
"""

from .panic_roots import DEFAULT_PANIC_PREFIXES, PanicRootClassifier, is_panic_root
from .line_annotator import FileReport, LineAnnotator, LineStatus
from .state import AnalysisState
from .reachability import ReachabilityAnalyzer
from .summary import FileSummary, band, format_percent, summarize
from .driver import AnalysisResult, analyze_module

__all__ = [
	"DEFAULT_PANIC_PREFIXES",
	"PanicRootClassifier",
	"is_panic_root",
	"FileReport",
	"LineAnnotator",
	"LineStatus",
	"AnalysisState",
	"ReachabilityAnalyzer",
	"FileSummary",
	"band",
	"format_percent",
	"summarize",
	"AnalysisResult",
	"analyze_module",
]
