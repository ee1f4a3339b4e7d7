# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Report package: HTML pages per source file, an index, and report.json.
"""

from .html_report import BAND_TEXT, LINE_BACKGROUND, render_file_html, render_index_html
from .writer import ReportOutput, is_included, page_name, write_reports

__all__ = [
	"BAND_TEXT",
	"LINE_BACKGROUND",
	"render_file_html",
	"render_index_html",
	"ReportOutput",
	"is_included",
	"page_name",
	"write_reports",
]
