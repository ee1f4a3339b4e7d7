# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import fnmatch
import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

from panicatorul.analysis.driver import AnalysisResult
from panicatorul.core.diagnostics import Diagnostic
from panicatorul.core.errors import REPORT_WRITE_FAILED, PanicatorulError
from .html_report import render_file_html, render_index_html

_UNSAFE_NAME_CHARS = re.compile(r"[\\/.:]")


@dataclass
class ReportOutput:
	pages: Dict[str, Path] = field(default_factory=dict)  # filename -> written page
	index_path: Path | None = None
	json_path: Path | None = None
	diagnostics: List[Diagnostic] = field(default_factory=list)


def page_name(filename: str) -> str:
	"""Flatten a debug-info filename into an output file name."""
	return _UNSAFE_NAME_CHARS.sub("_", filename) + ".html"


def is_included(filename: str, include: Sequence[str]) -> bool:
	if not include:
		return True
	normalized = filename.replace("\\", "/")
	return any(fnmatch.fnmatch(normalized, pat) for pat in include)


def _write_failed(path: Path, err: OSError) -> PanicatorulError:
	return PanicatorulError(
		reason_code=REPORT_WRITE_FAILED,
		message=f"cannot write {path}",
		artifact_path=str(path),
		detail=err.strerror or str(err),
	)


def _write_text(path: Path, text: str) -> None:
	tmp = path.with_name(path.name + f".tmp.{os.getpid()}")
	try:
		tmp.write_text(text, encoding="utf-8")
		os.replace(tmp, path)
	except OSError as err:
		raise _write_failed(path, err) from err
	finally:
		if tmp.exists():
			tmp.unlink()


def _unique_page_name(filename: str, taken: set[str]) -> str:
	"""`page_name`, with a numeric suffix when another file already flattened to it."""
	name = page_name(filename)
	stem = name[: -len(".html")]
	n = 2
	while name in taken:
		name = f"{stem}_{n}.html"
		n += 1
	taken.add(name)
	return name


def write_reports(
	output_dir: Path,
	result: AnalysisResult,
	include: Sequence[str] = (),
	source_root: Path = Path("."),
) -> ReportOutput:
	"""
	Write one HTML page per included file found on disk, the index and report.json.

	Debug-info filenames are resolved against `source_root` when relative. Files
	that cannot be read (std sources of the toolchain, generated code) are still
	in report.json but get no page; each is reported as a warning diagnostic.
	"""
	try:
		output_dir.mkdir(parents=True, exist_ok=True)
	except OSError as err:
		raise _write_failed(output_dir, err) from err
	out = ReportOutput()
	summaries = result.summaries()
	page_names: Dict[str, str] = {}
	taken: set[str] = set()

	for filename in sorted(result.files):
		if not is_included(filename, include):
			continue
		source = Path(filename)
		if not source.is_absolute():
			source = source_root / source
		try:
			text = source.read_text(encoding="utf-8", errors="replace")
		except OSError as err:
			out.diagnostics.append(
				Diagnostic(
					message=f"source not readable, no page rendered: {err.strerror or err}",
					phase="report",
					severity="warning",
					file=filename,
				)
			)
			continue
		name = _unique_page_name(filename, taken)
		html = render_file_html(filename, result.files[filename], text.splitlines())
		path = output_dir / name
		_write_text(path, html)
		out.pages[filename] = path
		page_names[filename] = name

	index_path = output_dir / "index.html"
	_write_text(
		index_path,
		render_index_html(
			page_names,
			summaries,
			function_count=result.function_count,
			panicky_function_count=result.panicky_function_count,
		),
	)
	out.index_path = index_path

	json_path = output_dir / "report.json"
	payload = result.to_dict()
	payload["pages"] = {name: page_names[name] for name in sorted(page_names)}
	_write_text(json_path, json.dumps(payload, indent=2, sort_keys=True) + "\n")
	out.json_path = json_path
	return out


__all__ = ["ReportOutput", "page_name", "is_included", "write_reports"]
