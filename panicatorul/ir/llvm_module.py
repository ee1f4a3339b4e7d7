# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
llvmlite-backed IR access layer.

`open_module(path)` parses a bitcode (`.bc`) or textual (`.ll`) module and
returns an `LlvmModule` to be used as a context manager. The module owns the
native llvmlite ModuleRef; functions, blocks and instructions handed out are
views that keep a reference to their module and refuse to be used once it has
been closed.

Function handles are created once per module (in module order) so identity and
hashing of handles is identity of the compiled function. Callee operands are
resolved to those handles by symbol name; anything else is an OtherValue.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from llvmlite import binding as llvm  # type: ignore

from panicatorul.core.errors import (
	ARTIFACT_UNREADABLE,
	ENCODING_FAILURE,
	FILE_NOT_FOUND,
	MODULE_CLOSED,
	PARSE_FAILURE,
	PanicatorulError,
)
from .debug_metadata import BlockAttachments, DebugMetadataTable, body_attachments
from .nodes import CALL_OPCODES, CallInstr, FunctionValue, Instr, OtherInstr, OtherValue, Value


def _decode_name(read_name, what: str) -> str:
	"""Read a symbol name through llvmlite, mapping bad UTF-8 to EncodingFailure."""
	try:
		return read_name()
	except UnicodeDecodeError as err:
		raise PanicatorulError(
			reason_code=ENCODING_FAILURE,
			message=f"{what} name is not valid UTF-8",
			detail=str(err),
		) from err


class LlvmFunction:
	"""View of one function of an open module."""

	__slots__ = ("_module", "_ref", "_name", "_attachments", "ordinal")

	def __init__(
		self,
		module: "LlvmModule",
		ref,
		name: str,
		ordinal: int,
		attachments: Sequence[BlockAttachments] = (),
	) -> None:
		self._module = module
		self._ref = ref
		self._name = name
		self._attachments = attachments
		self.ordinal = ordinal

	def name(self) -> str:
		return self._name

	def is_declaration(self) -> bool:
		self._module._check_open()
		return bool(self._ref.is_declaration)

	def basic_blocks(self) -> Iterator["LlvmBasicBlock"]:
		self._module._check_open()
		for i, block in enumerate(self._ref.blocks):
			dbg = self._attachments[i] if i < len(self._attachments) else ()
			yield LlvmBasicBlock(self._module, block, dbg)

	def __repr__(self) -> str:
		return f"LlvmFunction({self._name!r}, ordinal={self.ordinal})"


class LlvmBasicBlock:
	"""View of one basic block; instructions are decoded on iteration."""

	__slots__ = ("_module", "_ref", "_attachments")

	def __init__(self, module: "LlvmModule", ref, attachments: Sequence[Optional[int]] = ()) -> None:
		self._module = module
		self._ref = ref
		self._attachments = attachments

	def instructions(self) -> Iterator[Instr]:
		self._module._check_open()
		for i, instr in enumerate(self._ref.instructions):
			dbg = self._attachments[i] if i < len(self._attachments) else None
			yield self._module._decode_instruction(instr, dbg)


class LlvmModule:
	"""
	A parsed module plus its debug metadata table.

	Use as a context manager; `close()` releases the native module and is
	idempotent.
	"""

	def __init__(self, ref, source_path: Optional[Path] = None) -> None:
		self._ref = ref
		self.source_path = source_path
		self._closed = False
		self._functions: List[LlvmFunction] = []
		self._by_name: Dict[str, LlvmFunction] = {}
		try:
			text = str(ref)
			self.debug_metadata = DebugMetadataTable.from_module_text(text)
			# Definitions are printed in module order, declarations have no body.
			bodies = iter(body_attachments(text))
			for ordinal, fn_ref in enumerate(ref.functions):
				name = _decode_name(lambda: fn_ref.name, "function")
				attachments = [] if fn_ref.is_declaration else next(bodies, [])
				fn = LlvmFunction(self, fn_ref, name, ordinal, attachments)
				self._functions.append(fn)
				if name:
					self._by_name[name] = fn
		except Exception:
			self.close()
			raise

	def __enter__(self) -> "LlvmModule":
		return self

	def __exit__(self, exc_type, exc, tb) -> None:
		self.close()

	@property
	def closed(self) -> bool:
		return self._closed

	def close(self) -> None:
		if self._closed:
			return
		self._closed = True
		self._ref.close()

	def _check_open(self) -> None:
		if self._closed:
			raise PanicatorulError(
				reason_code=MODULE_CLOSED,
				message="IR view used after its module was closed",
				artifact_path=str(self.source_path) if self.source_path is not None else None,
			)

	def functions(self) -> Iterator[LlvmFunction]:
		self._check_open()
		return iter(list(self._functions))

	def function(self, name: str) -> Optional[LlvmFunction]:
		"""Look up a function handle by symbol name."""
		self._check_open()
		return self._by_name.get(name)

	def __len__(self) -> int:
		return len(self._functions)

	def _resolve_callee(self, operand) -> Value:
		kind = operand.value_kind
		kind_name = getattr(kind, "name", str(kind))
		if kind_name == "function":
			name = _decode_name(lambda: operand.name, "callee")
			fn = self._by_name.get(name)
			if fn is not None:
				return FunctionValue(fn)
		return OtherValue(kind=kind_name)

	def _decode_instruction(self, instr, dbg: Optional[int] = None) -> Instr:
		opcode = instr.opcode
		if opcode not in CALL_OPCODES:
			return OtherInstr(opcode=opcode)
		operands = list(instr.operands)
		# The called operand of call/invoke/callbr is always the last one.
		callee: Value = self._resolve_callee(operands[-1]) if operands else OtherValue()
		locations = self.debug_metadata.locations(dbg)
		return CallInstr(callee=callee, locations=locations, opcode=opcode)


def open_module(path: Path | str) -> LlvmModule:
	"""
	Parse `path` into an LlvmModule.

	`.bc` is read as bitcode, anything else as textual IR. A missing file is
	`file-not-found`, one that cannot be read is `artifact-unreadable`; LLVM
	rejecting the contents is `parse-failure` carrying the native diagnostic.
	"""
	path = Path(path)
	if not path.is_file():
		raise PanicatorulError(
			reason_code=FILE_NOT_FOUND,
			message=f"{path} does not exist",
			artifact_path=str(path),
		)
	try:
		if path.suffix == ".bc":
			ref = llvm.parse_bitcode(path.read_bytes())
		else:
			ref = llvm.parse_assembly(path.read_text(encoding="utf-8"))
	except UnicodeDecodeError as err:
		raise PanicatorulError(
			reason_code=ENCODING_FAILURE,
			message=f"{path} is not valid UTF-8 textual IR",
			artifact_path=str(path),
		) from err
	except RuntimeError as err:
		raise PanicatorulError(
			reason_code=PARSE_FAILURE,
			message="Failed to parse module",
			artifact_path=str(path),
			detail=str(err).strip(),
		) from err
	except OSError as err:
		raise PanicatorulError(
			reason_code=ARTIFACT_UNREADABLE,
			message=f"{path} cannot be read",
			artifact_path=str(path),
			detail=err.strerror or str(err),
		) from err
	return LlvmModule(ref, source_path=path)


def module_from_text(text: str) -> LlvmModule:
	"""Parse textual IR held in memory."""
	try:
		ref = llvm.parse_assembly(text)
	except RuntimeError as err:
		raise PanicatorulError(
			reason_code=PARSE_FAILURE,
			message="Failed to parse module",
			detail=str(err).strip(),
		) from err
	return LlvmModule(ref)


__all__ = ["LlvmFunction", "LlvmBasicBlock", "LlvmModule", "open_module", "module_from_text"]
