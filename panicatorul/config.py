# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Run configuration (v0).

Options come from an optional JSON file and are overridden by CLI flags:

	{
	  "format": "panicatorul-config",
	  "version": 0,
	  "package": "mycrate",
	  "target": "x86_64-unknown-linux-gnu",
	  "profile": "release",
	  "toolchain": "nightly-2023-09-17",
	  "output_dir": "target/panicatorul",
	  "panic_prefixes": ["_ZN4core9panicking"],
	  "required_llvm_major": 17,
	  "include": ["src/*.rs"]
	}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from panicatorul.analysis.panic_roots import DEFAULT_PANIC_PREFIXES
from panicatorul.core.errors import CONFIG_INVALID, PanicatorulError

DEFAULT_CONFIG_PATH = Path("panicatorul.json")
DEFAULT_TOOLCHAIN = "nightly-2023-09-17"
DEFAULT_REQUIRED_LLVM_MAJOR = 17


@dataclass(frozen=True)
class AnalyzeOptions:
	package: str | None = None
	target: str | None = None
	profile: str = "release"
	init: bool = False
	toolchain: str = DEFAULT_TOOLCHAIN
	artifact: Path | None = None  # analyze this file instead of the cargo output
	output_dir: Path = Path("target") / "panicatorul"
	panic_prefixes: tuple[str, ...] = DEFAULT_PANIC_PREFIXES
	required_llvm_major: int = DEFAULT_REQUIRED_LLVM_MAJOR
	include: tuple[str, ...] = ()  # glob patterns of files to render; empty = all
	json: bool = False


_STR_FIELDS = {"package", "target", "profile", "toolchain"}
_PATH_FIELDS = {"artifact", "output_dir"}
_STR_LIST_FIELDS = {"panic_prefixes", "include"}


def _invalid(path: Path, msg: str) -> PanicatorulError:
	return PanicatorulError(reason_code=CONFIG_INVALID, message=msg, artifact_path=str(path))


def load_config_v0(path: Path) -> dict[str, Any]:
	"""Load and validate a config file, returning AnalyzeOptions field values."""
	try:
		data = json.loads(path.read_text(encoding="utf-8"))
	except FileNotFoundError as err:
		raise _invalid(path, f"config file {path} does not exist") from err
	except OSError as err:
		raise _invalid(path, f"config file {path} cannot be read: {err.strerror or err}") from err
	except json.JSONDecodeError as err:
		raise _invalid(path, f"config file is not valid JSON: {err}") from err
	if not isinstance(data, dict):
		raise _invalid(path, "config must be a JSON object")
	if data.get("format") != "panicatorul-config" or data.get("version") != 0:
		raise _invalid(path, "unsupported config format/version (upgrade panicatorul?)")

	allowed = _STR_FIELDS | _PATH_FIELDS | _STR_LIST_FIELDS | {"format", "version", "required_llvm_major"}
	unknown = sorted(set(data.keys()) - allowed)
	if unknown:
		raise _invalid(path, f"config has unknown fields: {', '.join(unknown)}")

	out: dict[str, Any] = {}
	for key in sorted(_STR_FIELDS):
		if key in data:
			val = data[key]
			if not isinstance(val, str) or not val:
				raise _invalid(path, f"config field '{key}' must be a non-empty string")
			out[key] = val
	for key in sorted(_PATH_FIELDS):
		if key in data:
			val = data[key]
			if not isinstance(val, str) or not val:
				raise _invalid(path, f"config field '{key}' must be a non-empty path string")
			out[key] = Path(val)
	for key in sorted(_STR_LIST_FIELDS):
		if key in data:
			val = data[key]
			if not isinstance(val, list) or any((not isinstance(v, str) or not v) for v in val):
				raise _invalid(path, f"config field '{key}' must be a list of non-empty strings")
			out[key] = tuple(val)
	if "panic_prefixes" in out and not out["panic_prefixes"]:
		raise _invalid(path, "config field 'panic_prefixes' must not be empty")
	if "required_llvm_major" in data:
		val = data["required_llvm_major"]
		if isinstance(val, bool) or not isinstance(val, int) or val <= 0:
			raise _invalid(path, "config field 'required_llvm_major' must be a positive integer")
		out["required_llvm_major"] = val
	return out


def resolve_options(
	config_path: Path | None,
	overrides: Mapping[str, Any],
) -> AnalyzeOptions:
	"""
	Build AnalyzeOptions: defaults < config file < overrides.

	`None` values in `overrides` mean "not given on the command line". An
	explicitly named config file must exist; the default one is optional.
	"""
	opts = AnalyzeOptions()
	if config_path is not None:
		opts = replace(opts, **load_config_v0(config_path))
	elif DEFAULT_CONFIG_PATH.is_file():
		opts = replace(opts, **load_config_v0(DEFAULT_CONFIG_PATH))
	known = {f.name for f in fields(AnalyzeOptions)}
	given = {k: v for k, v in overrides.items() if v is not None and k in known}
	return replace(opts, **given)


__all__ = [
	"AnalyzeOptions",
	"DEFAULT_CONFIG_PATH",
	"DEFAULT_REQUIRED_LLVM_MAJOR",
	"DEFAULT_TOOLCHAIN",
	"load_config_v0",
	"resolve_options",
]
