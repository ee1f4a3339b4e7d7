# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`panicatorul` command line.

Run order: options → LLVM version gate → (optional) cargo build → locate
artifact → load module → analysis → reports → summary counts. Every failure is
fatal: it is printed once as a diagnostic and the exit code is 2.
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from panicatorul.analysis import PanicRootClassifier, analyze_module
from panicatorul.build import BuildOptions, do_init, locate_artifact
from panicatorul.config import AnalyzeOptions, resolve_options
from panicatorul.core.diagnostics import Diagnostic
from panicatorul.core.errors import PanicatorulError
from panicatorul.ir import check_toolchain_version, open_module
from panicatorul.report import write_reports


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(
		prog="panicatorul",
		description="Show which source lines of a Rust package can reach a panic",
	)
	p.add_argument("-p", "--package", type=str, default=None, help="Cargo package to analyze")
	p.add_argument("-t", "--target", type=str, default=None, help="Target triple (e.g. x86_64-unknown-linux-gnu)")
	p.add_argument("-r", "--profile", type=str, default=None, help="Build profile (default: release)")
	p.add_argument(
		"-i",
		"--init",
		action="store_true",
		default=None,
		help="Install the pinned nightly and build the package to LLVM bitcode first",
	)
	p.add_argument("--toolchain", type=str, default=None, help="Pinned rustup toolchain used by --init")
	p.add_argument(
		"--artifact",
		type=Path,
		default=None,
		help="Analyze this .bc/.ll file instead of target/<triple>/<profile>/deps/<package>.bc",
	)
	p.add_argument("--config", type=Path, default=None, help="Config file (default: ./panicatorul.json if present)")
	p.add_argument(
		"-o",
		"--output-dir",
		type=Path,
		default=None,
		help="Report directory (default: target/panicatorul)",
	)
	p.add_argument(
		"--panic-prefix",
		dest="panic_prefixes",
		action="append",
		default=None,
		help="Mangled-name prefix of panic roots (repeatable; default: _ZN4core9panicking)",
	)
	p.add_argument(
		"--llvm-major",
		dest="required_llvm_major",
		type=int,
		default=None,
		help="Required LLVM major version of the bitcode reader (default: 17)",
	)
	p.add_argument(
		"--include",
		action="append",
		default=None,
		help="Glob of debug-info filenames to render as HTML (repeatable; default: all)",
	)
	p.add_argument("--json", action="store_true", default=None, help="Emit one machine-readable JSON object")
	return p


def _emit_failure(diag: Diagnostic, as_json: bool) -> int:
	if as_json:
		print(json.dumps({"exit_code": 2, "diagnostics": [diag.to_dict()]}, sort_keys=True))
	else:
		print(diag.format_human(), file=sys.stderr)
	return 2


def run(opts: AnalyzeOptions) -> int:
	phase = "toolchain"
	try:
		check_toolchain_version(opts.required_llvm_major)

		phase = "build"
		if opts.artifact is not None:
			artifact = opts.artifact
		else:
			if opts.package is None or opts.target is None:
				return _emit_failure(
					Diagnostic(
						message="--package and --target are required unless --artifact is given",
						code="usage",
						phase="config",
					),
					opts.json,
				)
			build_opts = BuildOptions(
				package=opts.package,
				target=opts.target,
				profile=opts.profile,
				toolchain=opts.toolchain,
			)
			if opts.init:
				do_init(build_opts)
			artifact = locate_artifact(build_opts)

		phase = "load"
		time_total = time.perf_counter()
		with open_module(artifact) as module:
			load_secs = time.perf_counter() - time_total
			if not opts.json:
				print(f"loaded module in {load_secs:.3f}s")

			phase = "analysis"
			result = analyze_module(module, classifier=PanicRootClassifier(opts.panic_prefixes))
			skipped_records = module.debug_metadata.skipped_records

		phase = "report"
		output = write_reports(opts.output_dir, result, include=opts.include)
	except PanicatorulError as err:
		return _emit_failure(Diagnostic.from_error(err, phase=phase), opts.json)

	warnings = list(output.diagnostics)
	if skipped_records:
		warnings.append(
			Diagnostic(
				message=f"{skipped_records} debug-info records could not be read; their lines are reported as not in binary",
				phase="load",
				severity="warning",
				file=str(artifact),
			)
		)
	total_secs = time.perf_counter() - time_total

	if opts.json:
		payload = result.to_dict()
		payload["exit_code"] = 0
		payload["diagnostics"] = [d.to_dict() for d in warnings]
		payload["output_dir"] = str(opts.output_dir)
		print(json.dumps(payload, sort_keys=True))
		return 0

	for diag in warnings:
		print(diag.format_human(), file=sys.stderr)
	print(f"no of files: {len(result.files)}")
	print(f"no of panicky fns: {result.panicky_function_count}")
	print(f"total time: {total_secs:.3f}s")
	return 0


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	overrides = {
		"package": args.package,
		"target": args.target,
		"profile": args.profile,
		"init": args.init,
		"toolchain": args.toolchain,
		"artifact": args.artifact,
		"output_dir": args.output_dir,
		"panic_prefixes": tuple(args.panic_prefixes) if args.panic_prefixes else None,
		"required_llvm_major": args.required_llvm_major,
		"include": tuple(args.include) if args.include else None,
		"json": args.json,
	}
	try:
		opts = resolve_options(args.config, overrides)
	except PanicatorulError as err:
		return _emit_failure(Diagnostic.from_error(err, phase="config"), bool(args.json))
	return run(opts)


__all__ = ["main", "run"]
