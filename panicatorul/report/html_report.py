# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
HTML rendering of per-file line tables.

One page per source file: a summary header (clean percentage, clean/total
lines, coloured by band) and every line of the file on disk shaded by its
status. An index page links all rendered files.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import jinja2

from panicatorul.analysis.line_annotator import FileReport, LineStatus
from panicatorul.analysis.summary import FileSummary, summarize

BULMA_CSS = "https://cdn.jsdelivr.net/npm/bulma@0.9.1/css/bulma.min.css"

LINE_BACKGROUND = {
	LineStatus.NOT_IN_BINARY: "has-background-light",
	LineStatus.NO_PANIC: "has-background-success-light",
	LineStatus.PANIC: "has-background-danger-light",
}

BAND_TEXT = {
	"good": "has-text-success",
	"warning": "has-text-warning",
	"bad": "has-text-danger",
}

_FILE_TEMPLATE = """<!DOCTYPE html>
<html lang="en-us">

<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{{ filename }}</title>
    <link rel="stylesheet" href="{{ css }}">
</head>

<body>
    <div class="container">
    <nav class="level">
        <div class="level-item has-text-centered">
            <div>
                <p class="heading">Lines</p>
                <p class="title {{ band_class }}">
                    {{ summary.percent_text }}% ({{ summary.clean_lines }} / {{ summary.total_lines }})
                </p>
            </div>
        </div>
    </nav>
{% for row in rows %}
<div class="columns p-0 m-0" role="row">
    <div class="column is-1 is-narrow p-0 has-text-centered" id="{{ row.index }}" role="cell">
        <a href="#{{ row.index }}">{{ row.index }}</a>
    </div>
    <div class="column {{ row.background }} p-0" role="cell">
        <pre class="{{ row.background }} py-0 px-2">{{ row.text }}</pre>
    </div>
</div>
{% endfor %}
    </div>
</body>
</html>
"""

_INDEX_TEMPLATE = """<!DOCTYPE html>
<html lang="en-us">

<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>panicatorul</title>
    <link rel="stylesheet" href="{{ css }}">
</head>

<body>
    <div class="container">
    <nav class="level">
        <div class="level-item has-text-centered">
            <div>
                <p class="heading">Panicky functions</p>
                <p class="title">{{ panicky_function_count }} / {{ function_count }}</p>
            </div>
        </div>
    </nav>
    <table class="table is-fullwidth is-striped">
        <thead><tr><th>File</th><th>Clean</th><th>Lines</th></tr></thead>
        <tbody>
{% for entry in entries %}
            <tr>
                <td><a href="{{ entry.page }}">{{ entry.filename }}</a></td>
                <td class="{{ entry.band_class }}">{{ entry.summary.percent_text }}%</td>
                <td>{{ entry.summary.clean_lines }} / {{ entry.summary.total_lines }}</td>
            </tr>
{% endfor %}
        </tbody>
    </table>
    </div>
</body>
</html>
"""

_ENV = jinja2.Environment(autoescape=True, keep_trailing_newline=True)


def render_file_html(filename: str, report: FileReport, source_lines: Sequence[str]) -> str:
	"""Render one source file; `source_lines` are the file's lines without newlines."""
	summary = summarize(report)
	rows = [
		{
			"index": index,
			"text": text,
			"background": LINE_BACKGROUND[report.status(index)],
		}
		for index, text in enumerate(source_lines, start=1)
	]
	return _ENV.from_string(_FILE_TEMPLATE).render(
		filename=filename,
		css=BULMA_CSS,
		summary=summary,
		band_class=BAND_TEXT[summary.band],
		rows=rows,
	)


def render_index_html(
	pages: Mapping[str, str],
	summaries: Mapping[str, FileSummary],
	function_count: int,
	panicky_function_count: int,
) -> str:
	"""Render the index; `pages` maps filename -> page file name."""
	entries: list[dict[str, Any]] = []
	for filename in sorted(pages):
		summary = summaries[filename]
		entries.append(
			{
				"filename": filename,
				"page": pages[filename],
				"summary": summary,
				"band_class": BAND_TEXT[summary.band],
			}
		)
	return _ENV.from_string(_INDEX_TEMPLATE).render(
		css=BULMA_CSS,
		entries=entries,
		function_count=function_count,
		panicky_function_count=panicky_function_count,
	)


__all__ = ["render_file_html", "render_index_html", "LINE_BACKGROUND", "BAND_TEXT"]
