# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from panicatorul.analysis.panic_roots import PanicRootClassifier, is_panic_root
from panicatorul.test_support import PANIC_ROOT_NAME, ModuleBuilder


def test_core_panicking_symbols_are_roots() -> None:
	b = ModuleBuilder()
	assert is_panic_root(b.function(PANIC_ROOT_NAME))
	assert is_panic_root(b.function("_ZN4core9panicking18panic_bounds_check17h1111111111111111E"))


def test_other_symbols_are_not_roots() -> None:
	b = ModuleBuilder()
	assert not is_panic_root(b.function("_ZN4core3fmt5write17h2222222222222222E"))
	assert not is_panic_root(b.function("main"))
	assert not is_panic_root(b.function(""))
	# Prefix match only; the mangled prefix somewhere inside the name does not count.
	assert not is_panic_root(b.function("wrap_ZN4core9panicking5panic"))


def test_custom_prefixes_replace_default() -> None:
	b = ModuleBuilder()
	classifier = PanicRootClassifier(["my_abort", "_ZN3std9panicking"])
	assert classifier(b.function("my_abort_now"))
	assert classifier(b.function("_ZN3std9panicking20rust_panic_with_hook17h0E"))
	assert not classifier(b.function(PANIC_ROOT_NAME))
