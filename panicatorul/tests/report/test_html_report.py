# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from panicatorul.analysis.line_annotator import FileReport, LineStatus
from panicatorul.analysis.summary import summarize
from panicatorul.report.html_report import render_file_html, render_index_html


def _report() -> FileReport:
	report = FileReport("src/a.rs")
	report.set_line(1, False)
	report.set_line(2, True)
	return report


def test_file_page_shades_lines_by_status() -> None:
	html = render_file_html("src/a.rs", _report(), ["fn main() {", "    v[3];", "}"])
	assert "<title>src/a.rs</title>" in html
	assert "bulma" in html
	assert 'id="1"' in html and 'id="3"' in html
	assert html.count("has-background-success-light") == 2
	assert html.count("has-background-danger-light") == 2
	assert html.count('<pre class="has-background-light') == 1


def test_file_page_header_uses_band_colour() -> None:
	# 3 slots (filler + 2 lines), 1 panic: 66.67% is in the warning band.
	html = render_file_html("src/a.rs", _report(), ["a", "b"])
	assert "has-text-warning" in html
	assert "66.67% (2 / 3)" in html


def test_source_text_is_escaped() -> None:
	html = render_file_html("<a.rs>", FileReport("<a.rs>"), ['let s = "<script>&";'])
	assert "<script>" not in html
	assert "&lt;script&gt;&amp;" in html
	assert "&lt;a.rs&gt;" in html


def test_index_links_rendered_pages() -> None:
	good = FileReport("src/lib.rs", lines=[LineStatus.NOT_IN_BINARY, LineStatus.NO_PANIC])
	bad = FileReport("src/a.rs", lines=[LineStatus.PANIC, LineStatus.PANIC, LineStatus.NO_PANIC])
	summaries = {"src/lib.rs": summarize(good), "src/a.rs": summarize(bad)}
	html = render_index_html(
		{"src/lib.rs": "src_lib_rs.html", "src/a.rs": "src_a_rs.html"},
		summaries,
		function_count=12,
		panicky_function_count=5,
	)
	assert "5 / 12" in html
	assert html.index("src/a.rs") < html.index("src/lib.rs")
	assert 'href="src_lib_rs.html"' in html
	assert "has-text-success" in html
	assert "has-text-danger" in html
