# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Closed instruction/value unions produced by the IR access layer.

An instruction is either a call (`CallInstr`) or anything else (`OtherInstr`);
a called value is either a function of the module (`FunctionValue`) or
something the analysis cannot follow (`OtherValue`: function pointers, inline
asm, casts of unknown symbols). Consumers match with isinstance and treat
anything that is not the first variant as the second.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from panicatorul.core.source_location import NO_LOCATIONS, DebugLocations

if TYPE_CHECKING:
	from .protocol import Function


@dataclass(frozen=True)
class FunctionValue:
	"""The called operand resolved to a function handle of the module."""

	function: "Function"


@dataclass(frozen=True)
class OtherValue:
	"""The called operand is not a function of the module (indirect call etc.)."""

	kind: str = "unknown"


Value = Union[FunctionValue, OtherValue]


@dataclass(frozen=True)
class CallInstr:
	"""A call/invoke/callbr instruction with its callee and debug locations."""

	callee: Value
	locations: DebugLocations = NO_LOCATIONS
	opcode: str = "call"

	def resolved_function(self) -> Any:
		"""Return the callee function handle, or None when it does not resolve."""
		if isinstance(self.callee, FunctionValue):
			return self.callee.function
		return None


@dataclass(frozen=True)
class OtherInstr:
	"""Every non-call instruction; the analysis ignores these."""

	opcode: str = "other"


Instr = Union[CallInstr, OtherInstr]

CALL_OPCODES = frozenset({"call", "invoke", "callbr"})


__all__ = [
	"FunctionValue",
	"OtherValue",
	"Value",
	"CallInstr",
	"OtherInstr",
	"Instr",
	"CALL_OPCODES",
]
