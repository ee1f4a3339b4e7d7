# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Debug-location resolution from textual LLVM metadata.

llvmlite does not expose `LLVMGetDebugLocFilename`/`LLVMGetDebugLocLine`, so
the module's printed form is scanned once for the specialized debug-info nodes
that matter here (DILocation and the scope chain leading to a DIFile). Each
node's field list is parsed with the grammar in `debug_metadata.lark`.

Resolution of a `!dbg !N` attachment:
  DILocation.line                                  -> line
  DILocation.scope -> ... -> file: !F -> DIFile    -> filename (as recorded)
  DILocation.inlinedAt -> DILocation               -> inlined-at location
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, VisitError

from panicatorul.core.errors import ENCODING_FAILURE, PanicatorulError
from panicatorul.core.source_location import NO_LOCATIONS, DebugLocations, SourceLocation

_GRAMMAR_PATH = Path(__file__).with_name("debug_metadata.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_FIELDS_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	maybe_placeholders=False,
)

# Node kinds that can appear on the path from a DILocation to its DIFile.
_TRACKED_KINDS = (
	"DILocation",
	"DIFile",
	"DISubprogram",
	"DILexicalBlock",
	"DILexicalBlockFile",
	"DINamespace",
	"DICompositeType",
)

_RECORD_RE = re.compile(
	r"^!(\d+)\s*=\s*(?:distinct\s+)?!(" + "|".join(_TRACKED_KINDS) + r")\((.*)\)\s*$"
)
_DBG_ATTACHMENT_RE = re.compile(r"!dbg\s+!(\d+)")
_INSTR_START_RE = re.compile(r"^  [^\s\]]")
_HEX_ESCAPE_RE = re.compile(rb"\\([0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class MetadataRef:
	"""Reference to a numbered metadata node (`!N`)."""

	index: int


@dataclass(frozen=True)
class _Field:
	name: str
	value: Any


@dataclass
class MetadataRecord:
	index: int
	kind: str
	fields: Dict[str, Any] = field(default_factory=dict)


def decode_metadata_string(raw: str) -> str:
	"""
	Decode an LLVM metadata string literal (quotes included or not).

	LLVM prints every non-printable byte, `"` and `\\` as a `\\XX` hex escape, so
	the printed form is ASCII; the decoded bytes must be valid UTF-8.
	"""
	if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
		raw = raw[1:-1]
	data = _HEX_ESCAPE_RE.sub(lambda m: bytes([int(m.group(1), 16)]), raw.encode("utf-8"))
	try:
		return data.decode("utf-8")
	except UnicodeDecodeError as err:
		raise PanicatorulError(
			reason_code=ENCODING_FAILURE,
			message="debug-info string is not valid UTF-8",
			detail=repr(data),
		) from err


class _FieldsTransformer(Transformer):
	"""Turn a parsed field list into a `name -> value` dict."""

	def start(self, items: list[Any]) -> Dict[str, Any]:
		return {item.name: item.value for item in items if isinstance(item, _Field)}

	def field(self, items: list[Any]) -> _Field:
		name, value = items
		return _Field(str(name), value)

	def ref(self, items: list[Token]) -> MetadataRef:
		return MetadataRef(int(items[0][1:]))

	def string(self, items: list[Token]) -> str:
		return decode_metadata_string(str(items[0]))

	def number(self, items: list[Token]) -> int:
		return int(items[0])

	def flags(self, items: list[Token]) -> str:
		return " | ".join(str(tok) for tok in items)

	def node(self, items: list[Any]) -> tuple[str, list[Any]]:
		# Inline nodes (DIExpression and friends) are kept opaque.
		return ("inline:" + str(items[0])[1:], list(items[1:]))

	def md_tuple(self, items: list[Any]) -> tuple[Any, ...]:
		return tuple(items)


_TRANSFORMER = _FieldsTransformer()


def parse_fields(text: str) -> Dict[str, Any]:
	"""Parse the field list of one specialized node."""
	tree = _FIELDS_PARSER.parse(text)
	try:
		return _TRANSFORMER.transform(tree)
	except VisitError as err:
		# Undecodable strings are fatal, not a malformed record.
		if isinstance(err.orig_exc, PanicatorulError):
			raise err.orig_exc from None
		raise


def dbg_attachment(instruction_text: str) -> Optional[int]:
	"""Return N for an instruction printed with a `!dbg !N` attachment."""
	m = _DBG_ATTACHMENT_RE.search(instruction_text)
	if m is None:
		return None
	return int(m.group(1))


BlockAttachments = List[Optional[int]]


def body_attachments(text: str) -> List[List[BlockAttachments]]:
	"""
	`!dbg` attachment of every instruction of every function definition.

	Returns one entry per `define` in printed order, each a list of blocks,
	each a list of attachments in instruction order. Metadata slot numbers
	are only consistent within one printing of the whole module, so
	attachments are read here rather than from individually printed
	instructions.

	Printed layout: labels start in column 0; an instruction starts with
	two spaces; longer indentation (and a closing `]` of a switch) continues
	the previous instruction; `#dbg_*` records belong to no instruction.
	"""
	functions: List[List[BlockAttachments]] = []
	blocks: Optional[List[BlockAttachments]] = None
	current: Optional[BlockAttachments] = None
	pending: List[str] = []

	def flush() -> None:
		if pending and current is not None:
			current.append(dbg_attachment(" ".join(pending)))
		pending.clear()

	for line in text.splitlines():
		if blocks is None:
			if line.startswith("define ") and line.rstrip().endswith("{"):
				blocks = []
				current = None
			continue
		if line.startswith("}"):
			flush()
			functions.append(blocks)
			blocks = None
			continue
		stripped = line.strip()
		if not stripped or stripped.startswith(";") or stripped.startswith("#dbg_"):
			continue
		if not line[0].isspace():
			flush()
			current = []
			blocks.append(current)
			continue
		if _INSTR_START_RE.match(line):
			flush()
			if current is None:
				current = []
				blocks.append(current)
		pending.append(stripped)
	return functions


class DebugMetadataTable:
	"""
	Numbered debug-info nodes of one module, with DILocation resolution.

	Records whose field list does not parse are counted in `skipped_records`
	and otherwise ignored: a location that cannot be resolved is the same as
	no location.
	"""

	def __init__(self, records: Dict[int, MetadataRecord], skipped_records: int = 0) -> None:
		self._records = records
		self.skipped_records = skipped_records
		self._file_cache: Dict[int, str] = {}
		self._loc_cache: Dict[int, DebugLocations] = {}

	@classmethod
	def from_module_text(cls, text: str) -> "DebugMetadataTable":
		records: Dict[int, MetadataRecord] = {}
		skipped = 0
		for line in text.splitlines():
			if not line.startswith("!"):
				continue
			m = _RECORD_RE.match(line)
			if m is None:
				continue
			index = int(m.group(1))
			try:
				fields = parse_fields(m.group(3))
			except LarkError:
				skipped += 1
				continue
			records[index] = MetadataRecord(index=index, kind=m.group(2), fields=fields)
		return cls(records, skipped_records=skipped)

	def __len__(self) -> int:
		return len(self._records)

	def record(self, index: int) -> Optional[MetadataRecord]:
		return self._records.get(index)

	def locations(self, index: Optional[int]) -> DebugLocations:
		"""Resolve a `!dbg` attachment to its direct and inlined-at locations."""
		if index is None:
			return NO_LOCATIONS
		cached = self._loc_cache.get(index)
		if cached is not None:
			return cached
		direct = self._location(index, inlined=False)
		inlined_at: Optional[SourceLocation] = None
		rec = self._records.get(index)
		if rec is not None and rec.kind == "DILocation":
			parent = rec.fields.get("inlinedAt")
			if isinstance(parent, MetadataRef):
				inlined_at = self._location(parent.index, inlined=True)
		out = DebugLocations(direct=direct, inlined_at=inlined_at)
		self._loc_cache[index] = out
		return out

	def _location(self, index: int, *, inlined: bool) -> Optional[SourceLocation]:
		rec = self._records.get(index)
		if rec is None or rec.kind != "DILocation":
			return None
		line = rec.fields.get("line", 0)
		if not isinstance(line, int):
			line = 0
		filename = ""
		scope = rec.fields.get("scope")
		if isinstance(scope, MetadataRef):
			filename = self._scope_filename(scope.index)
		return SourceLocation(filename=filename, line=line, inlined=inlined)

	def _scope_filename(self, index: int) -> str:
		cached = self._file_cache.get(index)
		if cached is not None:
			return cached
		seen: set[int] = set()
		current: Optional[int] = index
		filename = ""
		while current is not None and current not in seen:
			seen.add(current)
			rec = self._records.get(current)
			if rec is None:
				break
			if rec.kind == "DIFile":
				name = rec.fields.get("filename", "")
				filename = name if isinstance(name, str) else ""
				break
			nxt = rec.fields.get("file")
			if not isinstance(nxt, MetadataRef):
				nxt = rec.fields.get("scope")
			current = nxt.index if isinstance(nxt, MetadataRef) else None
		self._file_cache[index] = filename
		return filename


__all__ = [
	"MetadataRef",
	"MetadataRecord",
	"DebugMetadataTable",
	"decode_metadata_string",
	"parse_fields",
	"dbg_attachment",
	"body_attachments",
]
