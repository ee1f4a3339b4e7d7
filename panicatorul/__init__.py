# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
panicatorul: which functions of a compiled program can reach a panic.

Pipeline placement:
  cargo rustc --emit llvm-bc → ir (llvmlite module) → analysis (reachability +
  line annotation) → report (HTML/JSON)
"""

__version__ = "0.1.0"
