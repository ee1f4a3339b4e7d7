# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from panicatorul.analysis import LineStatus, analyze_module
from panicatorul.core.errors import (
	ARTIFACT_UNREADABLE,
	ENCODING_FAILURE,
	FILE_NOT_FOUND,
	MODULE_CLOSED,
	PARSE_FAILURE,
	PanicatorulError,
)
from panicatorul.core.source_location import SourceLocation
from panicatorul.ir import CallInstr, OtherInstr, OtherValue, module_from_text, open_module
from panicatorul.test_support import PANIC_ROOT_NAME
from panicatorul.test_support.sample_ir import SAMPLE_MODULE_IR


def _instrs(fn) -> list:
	return [instr for block in fn.basic_blocks() for instr in block.instructions()]


def test_functions_in_module_order() -> None:
	with module_from_text(SAMPLE_MODULE_IR) as module:
		names = [fn.name() for fn in module.functions()]
		assert names == [PANIC_ROOT_NAME, "helper", "quiet", "caller"]
		assert len(module) == 4
		assert module.function(PANIC_ROOT_NAME).is_declaration()
		assert not module.function("caller").is_declaration()
		assert module.function("missing") is None


def test_calls_resolve_to_module_function_handles() -> None:
	with module_from_text(SAMPLE_MODULE_IR) as module:
		caller = module.function("caller")
		instrs = _instrs(caller)
		assert [type(i) for i in instrs] == [CallInstr, OtherInstr, CallInstr, CallInstr, OtherInstr]
		assert instrs[0].resolved_function() is module.function("helper")
		assert instrs[2].resolved_function() is module.function("quiet")
		assert instrs[3].resolved_function() is module.function(PANIC_ROOT_NAME)
		assert instrs[1].opcode == "br"


def test_inline_asm_callee_is_other_value() -> None:
	with module_from_text(SAMPLE_MODULE_IR) as module:
		call = _instrs(module.function("quiet"))[0]
		assert isinstance(call, CallInstr)
		assert isinstance(call.callee, OtherValue)
		assert call.resolved_function() is None


def test_debug_locations_of_calls() -> None:
	with module_from_text(SAMPLE_MODULE_IR) as module:
		helper_call = _instrs(module.function("helper"))[0]
		assert helper_call.locations.direct == SourceLocation("src/a.rs", 10)
		assert helper_call.locations.inlined_at is None

		caller = _instrs(module.function("caller"))
		assert caller[0].locations.direct == SourceLocation("src/a.rs", 20)
		assert caller[2].locations.direct == SourceLocation("src/a.rs", 21)
		inlined = caller[3].locations
		assert inlined.direct == SourceLocation("src/option.rs", 3)
		assert inlined.inlined_at == SourceLocation("src/a.rs", 22, inlined=True)


def test_analysis_over_llvm_module() -> None:
	with module_from_text(SAMPLE_MODULE_IR) as module:
		result = analyze_module(module)
	assert result.function_count == 4
	assert result.panicky_function_names == [PANIC_ROOT_NAME, "helper", "caller"]
	a_rs = result.files["src/a.rs"]
	assert a_rs.status(10) is LineStatus.PANIC
	assert a_rs.status(16) is LineStatus.NO_PANIC
	assert a_rs.status(20) is LineStatus.PANIC
	assert a_rs.status(21) is LineStatus.NO_PANIC
	assert a_rs.status(22) is LineStatus.PANIC
	assert a_rs.status(11) is LineStatus.NOT_IN_BINARY
	assert result.files["src/option.rs"].status(3) is LineStatus.PANIC


def test_open_module_reads_textual_ir(tmp_path: Path) -> None:
	path = tmp_path / "sample.ll"
	path.write_text(SAMPLE_MODULE_IR, encoding="utf-8")
	with open_module(path) as module:
		assert module.source_path == path
		assert module.function("helper") is not None
	assert module.closed


def test_open_module_missing_file(tmp_path: Path) -> None:
	with pytest.raises(PanicatorulError) as excinfo:
		open_module(tmp_path / "absent.bc")
	assert excinfo.value.reason_code == FILE_NOT_FOUND
	assert excinfo.value.artifact_path == str(tmp_path / "absent.bc")


@pytest.mark.parametrize("name, data", [("bad.ll", b"this is not IR\n"), ("bad.bc", b"\x00\x01garbage")])
def test_open_module_parse_failure(tmp_path: Path, name: str, data: bytes) -> None:
	path = tmp_path / name
	path.write_bytes(data)
	with pytest.raises(PanicatorulError) as excinfo:
		open_module(path)
	assert excinfo.value.reason_code == PARSE_FAILURE
	assert excinfo.value.detail


def test_open_module_textual_ir_must_be_utf8(tmp_path: Path) -> None:
	path = tmp_path / "bad.ll"
	path.write_bytes(b"; \xff\xfe\n")
	with pytest.raises(PanicatorulError) as excinfo:
		open_module(path)
	assert excinfo.value.reason_code == ENCODING_FAILURE


def test_views_refuse_use_after_close() -> None:
	module = module_from_text(SAMPLE_MODULE_IR)
	caller = module.function("caller")
	blocks = list(caller.basic_blocks())
	module.close()
	module.close()
	assert caller.name() == "caller"
	with pytest.raises(PanicatorulError) as excinfo:
		list(caller.basic_blocks())
	assert excinfo.value.reason_code == MODULE_CLOSED
	with pytest.raises(PanicatorulError):
		list(blocks[0].instructions())
	with pytest.raises(PanicatorulError):
		module.functions()


def test_module_closed_when_body_raises() -> None:
	with pytest.raises(RuntimeError):
		with module_from_text(SAMPLE_MODULE_IR) as module:
			raise RuntimeError("boom")
	assert module.closed


def test_function_name_must_be_utf8() -> None:
	with pytest.raises(PanicatorulError) as excinfo:
		module_from_text('define void @"\\FFx"() {\n  ret void\n}\n')
	assert excinfo.value.reason_code == ENCODING_FAILURE
	assert "function name" in excinfo.value.message


_UNWIND_IR = r"""
declare void @_ZN4core9panicking5panic17h0123456789abcdefE()

declare i32 @rust_eh_personality(...)

define void @may_unwind() personality ptr @rust_eh_personality !dbg !5 {
start:
  invoke void @_ZN4core9panicking5panic17h0123456789abcdefE()
          to label %done unwind label %cleanup, !dbg !7

done:
  ret void, !dbg !8

cleanup:
  %lp = landingpad { ptr, i32 }
          cleanup
  resume { ptr, i32 } %lp, !dbg !8
}

!llvm.dbg.cu = !{!0}
!llvm.module.flags = !{!3}

!0 = distinct !DICompileUnit(language: DW_LANG_Rust, file: !1, producer: "rustc", isOptimized: true, runtimeVersion: 0, emissionKind: FullDebug)
!1 = !DIFile(filename: "src/unwind.rs", directory: "/work")
!2 = !DISubroutineType(types: !4)
!3 = !{i32 2, !"Debug Info Version", i32 3}
!4 = !{null}
!5 = distinct !DISubprogram(name: "may_unwind", scope: !1, file: !1, line: 1, type: !2, scopeLine: 1, spFlags: DISPFlagDefinition, unit: !0)
!7 = !DILocation(line: 3, column: 5, scope: !5)
!8 = !DILocation(line: 4, column: 1, scope: !5)
"""


def test_invoke_is_a_call_site() -> None:
	with module_from_text(_UNWIND_IR) as module:
		fn = module.function("may_unwind")
		instrs = _instrs(fn)
		assert [i.opcode for i in instrs] == ["invoke", "ret", "landingpad", "resume"]
		invoke = instrs[0]
		assert isinstance(invoke, CallInstr)
		assert invoke.resolved_function() is module.function(PANIC_ROOT_NAME)
		assert invoke.locations.direct == SourceLocation("src/unwind.rs", 3)

		result = analyze_module(module)
	assert "may_unwind" in result.panicky_function_names
	report = result.files["src/unwind.rs"]
	assert report.status(3) is LineStatus.PANIC
	assert report.status(4) is LineStatus.NOT_IN_BINARY


def test_open_module_unreadable_artifact(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
	path = tmp_path / "locked.bc"
	path.write_bytes(b"BC")

	def deny(self) -> bytes:
		raise PermissionError(13, "Permission denied", str(self))

	monkeypatch.setattr(Path, "read_bytes", deny)
	with pytest.raises(PanicatorulError) as excinfo:
		open_module(path)
	assert excinfo.value.reason_code == ARTIFACT_UNREADABLE
	assert excinfo.value.detail == "Permission denied"
