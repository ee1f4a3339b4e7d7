# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structural protocol for the IR access layer consumed by the analysis.

Two implementations exist: the llvmlite-backed module in `llvm_module` and the
in-memory builder in `panicatorul.test_support`. The analysis only relies on
what is declared here plus the instruction/value union in `nodes`.

Function handles are compared by identity: a module hands out exactly one
handle object per compiled function, so `==`/`hash` on handles is handle
identity, never name equality.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Protocol

from .nodes import Instr


class BasicBlock(Protocol):
	def instructions(self) -> Iterable[Instr]:
		"""Instructions of the block, in order."""
		...


class Function(Protocol):
	def name(self) -> str:
		"""Mangled symbol name."""
		...

	def basic_blocks(self) -> Iterable[BasicBlock]:
		"""Blocks of the body; empty for declarations."""
		...


class Module(Protocol):
	def functions(self) -> Iterator[Function]:
		"""
		Fresh iterator over every function of the module.

		Each call restarts from the first function and yields the same handle
		objects as previous calls.
		"""
		...


__all__ = ["BasicBlock", "Function", "Module"]
