# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
IR access layer.

Pipeline placement:
  artifact (.bc/.ll) → ir (this package) → analysis → report

Public API:
  - open_module / LlvmModule: llvmlite-backed module with function/block/instruction views
  - CallInstr / OtherInstr, FunctionValue / OtherValue: closed instruction/value unions
  - Module / Function / BasicBlock: protocols the analysis is written against
  - toolchain_version / check_toolchain_version: LLVM version gate
"""

from .nodes import (
	CALL_OPCODES,
	CallInstr,
	FunctionValue,
	Instr,
	OtherInstr,
	OtherValue,
	Value,
)
from .protocol import BasicBlock, Function, Module
from .llvm_module import LlvmBasicBlock, LlvmFunction, LlvmModule, module_from_text, open_module
from .version import ToolchainVersion, check_toolchain_version, toolchain_version

__all__ = [
	"CALL_OPCODES",
	"CallInstr",
	"FunctionValue",
	"Instr",
	"OtherInstr",
	"OtherValue",
	"Value",
	"BasicBlock",
	"Function",
	"Module",
	"LlvmBasicBlock",
	"LlvmFunction",
	"LlvmModule",
	"module_from_text",
	"open_module",
	"ToolchainVersion",
	"check_toolchain_version",
	"toolchain_version",
]
