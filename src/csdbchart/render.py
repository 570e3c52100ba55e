"""Render display records as a DataTables page and a JSON data file."""

import html
import json
import logging
from dataclasses import asdict
from pathlib import Path
from string import Template

from csdbchart.models import DisplayRecord

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "CSDb Top Demos"
ERROR_MESSAGE = "Error loading data from CSDB"
ERROR_PROGRESS = "Please try again later"

JQUERY_JS = "https://code.jquery.com/jquery-3.7.1.min.js"
DATATABLES_JS = "https://cdn.datatables.net/1.13.8/js/jquery.dataTables.min.js"
DATATABLES_CSS = "https://cdn.datatables.net/1.13.8/css/jquery.dataTables.min.css"

# Column order of the table. "render" names a renderer defined in the page script.
TABLE_COLUMNS = [
    {"title": "#", "data": "place", "width": "40px"},
    {"title": "", "data": "screenshot", "orderable": False, "width": "80px",
     "render": "screenshot"},
    {"title": "Name", "data": "name", "render": "name"},
    {"title": "Release date", "data": "releaseDate", "render": "releaseDate"},
    {"title": "Event", "data": "event", "render": "text"},
    {"title": "Achievement", "data": "achievement", "render": "text"},
    {"title": "Rating", "data": "rating", "render": "rating"},
    {"title": "Votes", "data": "votes"},
    {"title": "", "data": "id", "render": "link"},
]

# Python field name -> key used by the page script
_ROW_KEYS = {
    "release_date": "releaseDate",
    "release_date_sort_value": "releaseDateSortValue",
    "csdb_url": "csdbUrl",
}


def table_options() -> dict:
    """DataTables options: sort by place, every row on one page, search box."""
    return {
        "dom": "lrtip",
        "order": [[0, "asc"]],
        "lengthMenu": [[-1], ["All"]],
        "pageLength": -1,
        "responsive": True,
        "language": {"search": "Search demos:"},
    }


def records_to_rows(records: list[DisplayRecord]) -> list[dict]:
    rows = []
    for r in records:
        rows.append({_ROW_KEYS.get(k, k): v for k, v in asdict(r).items()})
    return rows


def _script_json(data: object) -> str:
    """JSON safe to embed inside a <script> element."""
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


_PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>$title</title>
<link rel="stylesheet" href="$datatables_css">
<style>
  .hidden { display: none; }
  .rating-cell { font-weight: bold; }
</style>
</head>
<body>
<h1>$title</h1>
<div class="loading-container$loading_class">
  <div class="loading-spinner"$spinner_style></div>
  <p id="loading-message">$message</p>
  <p id="loading-progress">$progress</p>
</div>
<table id="demos-table" class="display" style="width:100%"></table>
<script src="$jquery_js"></script>
<script src="$datatables_js"></script>
<script>
const rows = $rows;
const columns = $columns;
const options = $options;
const esc = (value) => String(value ?? '').replace(/[&<>"']/g,
  ch => ({'&': '&amp;', '<': '&lt;', '>': '&gt;', '"': '&quot;', "'": '&#39;'})[ch]);
const renderers = {
  screenshot: (data, type, row) => (type === 'display' && data)
    ? `<a href="$${esc(row.csdbUrl)}" target="_blank"><img src="$${esc(data)}" width="80" alt="$${esc(row.name)}"></a>` : '',
  name: (data, type, row) => type === 'display'
    ? `<a href="$${esc(row.csdbUrl)}" target="_blank">$${esc(data)}</a>` : data,
  text: (data, type) => type === 'display' ? esc(data) : data,
  releaseDate: (data, type, row) => (type === 'display' || type === 'filter')
    ? data : row.releaseDateSortValue,
  rating: (data, type) => type === 'display'
    ? `<span class="rating-cell">$${data.toFixed(1)}</span>/10` : data,
  link: (data) => `<a class="view-link" href="$${'https://csdb.dk/release/?id=' + encodeURIComponent(data)}" target="_blank">View on CSDb</a>`,
};
columns.forEach(c => {
  if (c.render) { c.render = renderers[c.render]; }
  c.defaultContent = '';
});
$$(function() {
  if (rows !== null) {
    $$('#demos-table').DataTable(Object.assign({data: rows, columns: columns}, options));
  }
});
</script>
</body>
</html>
""")


def _render(title: str, rows: list[dict] | None, message: str, progress: str, failed: bool) -> str:
    return _PAGE.substitute(
        title=html.escape(title),
        datatables_css=DATATABLES_CSS,
        jquery_js=JQUERY_JS,
        datatables_js=DATATABLES_JS,
        loading_class="" if failed else " hidden",
        spinner_style=' style="display: none"' if failed else "",
        message=html.escape(message),
        progress=html.escape(progress),
        rows=_script_json(rows),
        columns=_script_json(TABLE_COLUMNS),
        options=_script_json(table_options()),
    )


def render_page(records: list[DisplayRecord], title: str = DEFAULT_TITLE) -> str:
    """Full HTML page with the records loaded into the table."""
    return _render(
        title, records_to_rows(records),
        f"Loaded {len(records)} demos", "All data retrieved", failed=False,
    )


def render_error_page(title: str = DEFAULT_TITLE) -> str:
    """Failure page: static error message, spinner hidden, no table data."""
    return _render(title, None, ERROR_MESSAGE, ERROR_PROGRESS, failed=True)


def write_page(path: Path, page_html: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(page_html, encoding="utf-8")
    logger.info("Wrote page to %s", path)


def write_json(path: Path, records: list[DisplayRecord]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records_to_rows(records), f, ensure_ascii=False, indent=2)
    logger.info("Wrote %d records to %s", len(records), path)
