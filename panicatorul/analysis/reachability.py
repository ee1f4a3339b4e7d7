# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Panic reachability over the call graph of one module.

  is_panicky(f):
    memoized            -> memo[f]
    panic root          -> True   (body ignored, not memoized)
    already in progress -> False  (cycle: conservative-false)
    otherwise           -> OR of is_panicky(callee) over every call in f's
                           body whose callee resolves to a function; the
                           result is memoized once f leaves in-progress.

The traversal keeps its own stack of frames instead of recursing, so deep
call chains are bounded by memory, not by the interpreter's recursion limit.
Each frame suspends at the call it descended into and resumes with the
callee's result, which reproduces the recursive formulation step for step.

Consequence of conservative-false: the back edge of a cycle reads False, and
whatever was computed from it is memoized. With A -> B, B -> A and A -> root,
entering at A memoizes B as not panicky (its only way to the root runs back
through A), while entering at B classifies both as panicky. Results for such
functions depend on the order in which the driver enumerates the module.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

from panicatorul.core.source_location import SourceLocation
from panicatorul.ir.nodes import CallInstr, Instr
from panicatorul.ir.protocol import Function
from .panic_roots import PanicRootClassifier
from .state import AnalysisState

CallObserver = Callable[[Iterable[SourceLocation], bool], None]


@dataclass
class _Frame:
	function: Function
	instrs: Iterator[Instr]
	result: bool = False
	pending: Optional[CallInstr] = None


def _body(function: Function) -> Iterator[Instr]:
	for block in function.basic_blocks():
		yield from block.instructions()


class ReachabilityAnalyzer:
	"""
	Memoized, cycle-safe panic reachability.

	`observer`, when given, is called once per call instruction of every body
	traversed, with the instruction's source locations and its classification
	at that moment. Bodies are traversed at most once per run (roots never), so
	each such call is reported exactly once.
	"""

	def __init__(
		self,
		classifier: PanicRootClassifier | None = None,
		observer: CallObserver | None = None,
		state: AnalysisState | None = None,
	) -> None:
		self.classifier = classifier if classifier is not None else PanicRootClassifier()
		self.observer = observer
		self.state = state if state is not None else AnalysisState()

	def is_panicky(self, function: Function) -> bool:
		known = self._lookup(function)
		if known is not None:
			return known
		return self._traverse(function)

	def classify_call(self, instr: Instr) -> bool:
		"""Classification of a call instruction; non-calls and unresolved callees are False."""
		if not isinstance(instr, CallInstr):
			return False
		callee = instr.resolved_function()
		if callee is None:
			return False
		return self.is_panicky(callee)

	def panicky_functions(self) -> List[Function]:
		"""Memoized functions classified panicky (roots are never memoized)."""
		return [fn for fn, panicky in self.state.memo.items() if panicky]

	def _lookup(self, function: Function) -> Optional[bool]:
		memo = self.state.memo
		if function in memo:
			return memo[function]
		if self.classifier.is_panic_root(function):
			return True
		if function in self.state.in_progress:
			return False
		return None

	def _enter(self, function: Function) -> _Frame:
		self.state.in_progress.add(function)
		return _Frame(function=function, instrs=_body(function))

	def _leave(self, frame: _Frame) -> bool:
		self.state.in_progress.discard(frame.function)
		self.state.memo[frame.function] = frame.result
		return frame.result

	def _settle(self, frame: _Frame, instr: CallInstr, panicky: bool) -> None:
		frame.result = frame.result or panicky
		if self.observer is not None:
			self.observer(instr.locations, panicky)

	def _traverse(self, root: Function) -> bool:
		stack: List[_Frame] = [self._enter(root)]
		returned: Optional[bool] = None
		while True:
			frame = stack[-1]
			if returned is not None:
				assert frame.pending is not None
				self._settle(frame, frame.pending, returned)
				frame.pending = None
				returned = None

			descended = False
			for instr in frame.instrs:
				if not isinstance(instr, CallInstr):
					continue
				callee = instr.resolved_function()
				if callee is None:
					self._settle(frame, instr, False)
					continue
				known = self._lookup(callee)
				if known is not None:
					self._settle(frame, instr, known)
					continue
				frame.pending = instr
				stack.append(self._enter(callee))
				descended = True
				break
			if descended:
				continue

			stack.pop()
			result = self._leave(frame)
			if not stack:
				return result
			returned = result


__all__ = ["ReachabilityAnalyzer", "CallObserver"]
