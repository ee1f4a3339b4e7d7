# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Small textual module with debug info, shaped like rustc output.

  helper  calls core::panicking::panic            (src/a.rs:10)
  quiet   runs inline asm only                    (src/a.rs:16)
  caller  calls helper                            (src/a.rs:20)
          calls quiet                             (src/a.rs:21)
          calls panic inlined from unwrap         (src/option.rs:3, inlined at src/a.rs:22)

No pointer types are used so every LLVM major llvmlite ships with accepts it.
"""

SAMPLE_MODULE_IR = r"""
; ModuleID = 'sample'
source_filename = "sample"

declare void @_ZN4core9panicking5panic17h0123456789abcdefE()

define void @helper() !dbg !5 {
start:
  call void @_ZN4core9panicking5panic17h0123456789abcdefE(), !dbg !8
  ret void, !dbg !9
}

define void @quiet() !dbg !10 {
start:
  call void asm sideeffect "", ""(), !dbg !11
  ret void, !dbg !11
}

define void @caller() !dbg !12 {
start:
  call void @helper(), !dbg !13
  br label %bb1, !dbg !13

bb1:
  call void @quiet(), !dbg !14
  call void @_ZN4core9panicking5panic17h0123456789abcdefE(), !dbg !15
  ret void, !dbg !17
}

!llvm.dbg.cu = !{!0}
!llvm.module.flags = !{!3, !4}

!0 = distinct !DICompileUnit(language: DW_LANG_Rust, file: !1, producer: "rustc", isOptimized: true, runtimeVersion: 0, emissionKind: FullDebug)
!1 = !DIFile(filename: "src/a.rs", directory: "/work")
!2 = !DISubroutineType(types: !20)
!3 = !{i32 2, !"Debug Info Version", i32 3}
!4 = !{i32 7, !"Dwarf Version", i32 4}
!5 = distinct !DISubprogram(name: "helper", scope: !1, file: !1, line: 8, type: !2, scopeLine: 8, spFlags: DISPFlagDefinition | DISPFlagOptimized, unit: !0)
!8 = !DILocation(line: 10, column: 5, scope: !5)
!9 = !DILocation(line: 11, column: 2, scope: !5)
!10 = distinct !DISubprogram(name: "quiet", scope: !1, file: !1, line: 15, type: !2, scopeLine: 15, spFlags: DISPFlagDefinition, unit: !0)
!11 = !DILocation(line: 16, column: 5, scope: !10)
!12 = distinct !DISubprogram(name: "caller", scope: !1, file: !1, line: 18, type: !2, scopeLine: 18, spFlags: DISPFlagDefinition, unit: !0)
!13 = !DILocation(line: 20, column: 5, scope: !12)
!14 = !DILocation(line: 21, column: 5, scope: !12)
!15 = !DILocation(line: 3, column: 9, scope: !16, inlinedAt: !18)
!16 = distinct !DISubprogram(name: "unwrap", scope: !19, file: !19, line: 1, type: !2, scopeLine: 1, spFlags: DISPFlagDefinition, unit: !0)
!17 = !DILocation(line: 23, column: 2, scope: !12)
!18 = !DILocation(line: 22, column: 5, scope: !12)
!19 = !DIFile(filename: "src/option.rs", directory: "/work")
!20 = !{null}
"""

__all__ = ["SAMPLE_MODULE_IR"]
