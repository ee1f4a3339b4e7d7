# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Panic roots: functions whose execution unconditionally signals a panic.

A root is recognised purely by its mangled symbol prefix. The default is the
legacy-mangled `core::panicking` module, which every panic path of the Rust
standard library funnels through.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from panicatorul.ir.protocol import Function

DEFAULT_PANIC_PREFIXES: Tuple[str, ...] = ("_ZN4core9panicking",)


class PanicRootClassifier:
	"""Name-prefix predicate over function handles."""

	def __init__(self, prefixes: Iterable[str] = DEFAULT_PANIC_PREFIXES) -> None:
		self.prefixes: Tuple[str, ...] = tuple(prefixes)

	def is_panic_root(self, function: Function) -> bool:
		return function.name().startswith(self.prefixes)

	def __call__(self, function: Function) -> bool:
		return self.is_panic_root(function)


_DEFAULT = PanicRootClassifier()


def is_panic_root(function: Function) -> bool:
	"""Classify with the default prefix."""
	return _DEFAULT.is_panic_root(function)


__all__ = ["DEFAULT_PANIC_PREFIXES", "PanicRootClassifier", "is_panic_root"]
