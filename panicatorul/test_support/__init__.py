# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
In-memory IR modules for tests.

These implement the same Module/Function/BasicBlock protocol as the llvmlite
layer, so analysis tests can spell call graphs directly:

	b = ModuleBuilder()
	root = b.function("_ZN4core9panicking5panic17h0E")
	helper = b.function("helper")
	helper.call(root, at=("a.rs", 10))
	module = b.build()
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from panicatorul.core.source_location import DebugLocations, SourceLocation
from panicatorul.ir.nodes import CallInstr, FunctionValue, Instr, OtherInstr, OtherValue

Loc = Tuple[str, int]


def _locations(at: Optional[Loc], inlined_at: Optional[Loc]) -> DebugLocations:
	direct = SourceLocation(at[0], at[1]) if at is not None else None
	parent = SourceLocation(inlined_at[0], inlined_at[1], inlined=True) if inlined_at is not None else None
	return DebugLocations(direct=direct, inlined_at=parent)


class MemoryBasicBlock:
	def __init__(self, name: str) -> None:
		self.name = name
		self.instrs: List[Instr] = []

	def instructions(self) -> Iterator[Instr]:
		return iter(list(self.instrs))


class MemoryFunction:
	"""Function handle; identity-compared like the llvmlite handles."""

	def __init__(self, name: str) -> None:
		self._name = name
		self.blocks: List[MemoryBasicBlock] = []
		self.body_visits = 0

	def name(self) -> str:
		return self._name

	def basic_blocks(self) -> Iterator[MemoryBasicBlock]:
		self.body_visits += 1
		return iter(list(self.blocks))

	def block(self, name: str = "entry") -> MemoryBasicBlock:
		bb = MemoryBasicBlock(name)
		self.blocks.append(bb)
		return bb

	def _current_block(self) -> MemoryBasicBlock:
		if not self.blocks:
			return self.block()
		return self.blocks[-1]

	def call(
		self,
		callee: "MemoryFunction",
		at: Optional[Loc] = None,
		inlined_at: Optional[Loc] = None,
	) -> "MemoryFunction":
		self._current_block().instrs.append(
			CallInstr(callee=FunctionValue(callee), locations=_locations(at, inlined_at))
		)
		return self

	def call_indirect(self, at: Optional[Loc] = None, inlined_at: Optional[Loc] = None) -> "MemoryFunction":
		self._current_block().instrs.append(
			CallInstr(callee=OtherValue(kind="instruction"), locations=_locations(at, inlined_at))
		)
		return self

	def other(self, opcode: str = "add") -> "MemoryFunction":
		self._current_block().instrs.append(OtherInstr(opcode=opcode))
		return self

	def __repr__(self) -> str:
		return f"MemoryFunction({self._name!r})"


class MemoryModule:
	def __init__(self, functions: Sequence[MemoryFunction]) -> None:
		self._functions = list(functions)

	def functions(self) -> Iterator[MemoryFunction]:
		return iter(list(self._functions))


class ModuleBuilder:
	def __init__(self) -> None:
		self._functions: List[MemoryFunction] = []

	def function(self, name: str) -> MemoryFunction:
		fn = MemoryFunction(name)
		self._functions.append(fn)
		return fn

	def build(self) -> MemoryModule:
		return MemoryModule(self._functions)


PANIC_ROOT_NAME = "_ZN4core9panicking5panic17h0123456789abcdefE"


__all__ = [
	"MemoryBasicBlock",
	"MemoryFunction",
	"MemoryModule",
	"ModuleBuilder",
	"PANIC_ROOT_NAME",
]
