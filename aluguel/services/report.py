"""
This module defines the ReportRenderer class, which writes the canonical
result as JSON and as a paginated HTML table whose numeric columns sort
on click.
"""
import html
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from aluguel.core.constants import DEFAULT_ROWS_PER_PAGE, OUTPUT_DIR
from aluguel.core.listing import Listing

logger = logging.getLogger(__name__)

COLUMNS = (
    ("link", "LINK"),
    ("title", "TITULO"),
    ("price", "ALUGUEL"),
    ("iptu", "IPTU"),
    ("condominio", "CONDOMINIO"),
    ("totalPrice", "TOTAL"),
    ("area", "AREA"),
    ("bedrooms", "QUARTOS"),
    ("bathrooms", "BANHEIROS"),
    ("location", "LOCALIZACAO"),
    ("datePosted", "DATA ANUNCIO"),
    ("origin", "ORIGEM"),
)

NUMERIC_COLUMNS = frozenset(
    ("price", "iptu", "condominio", "totalPrice", "area", "bedrooms", "bathrooms")
)

_PAGE_SCRIPT = """
<script>
  const pages = document.querySelectorAll('tbody.page');
  const label = document.getElementById('page-label');
  const pageSize = pages.length ? pages[0].rows.length : 0;
  let current = 0;
  let sorted = { column: -1, ascending: true };
  function show(index) {
    current = Math.max(0, Math.min(pages.length - 1, index));
    pages.forEach((page, i) => { page.hidden = i !== current; });
    label.textContent = (current + 1) + ' / ' + Math.max(pages.length, 1);
  }
  document.getElementById('prev').onclick = () => show(current - 1);
  document.getElementById('next').onclick = () => show(current + 1);
  function sortBy(column) {
    const ascending = sorted.column === column ? !sorted.ascending : true;
    sorted = { column: column, ascending: ascending };
    const rows = [];
    pages.forEach((page) => rows.push(...page.rows));
    rows.sort((a, b) => {
      const diff = Number(a.cells[column].textContent) - Number(b.cells[column].textContent);
      return ascending ? diff : -diff;
    });
    rows.forEach((row, i) => pages[Math.floor(i / pageSize)].appendChild(row));
    show(0);
  }
  document.querySelectorAll('th[data-numeric]').forEach((th) => {
    th.style.cursor = 'pointer';
    th.onclick = () => sortBy(th.cellIndex);
  });
  show(0);
</script>
"""


@dataclass
class ReportPaths:
    """Locations of the files written for one result."""
    json_path: Path
    html_path: Path


class ReportRenderer:
    """Writes the canonical JSON result and a human-readable HTML report."""

    def __init__(self, output_dir: str = OUTPUT_DIR, rows_per_page: int = DEFAULT_ROWS_PER_PAGE):
        self.output_dir = Path(output_dir)
        self.rows_per_page = max(1, rows_per_page)

    def render(self, listings: Sequence[Listing]) -> ReportPaths:
        """
        Writes result-<timestamp>.json and result-<timestamp>.html.

        Args:
            listings: The canonical listing sequence, already ordered.

        Returns:
            Paths of both files.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        name = f"result-{int(time.time() * 1000)}"
        paths = ReportPaths(
            json_path=self.output_dir / f"{name}.json",
            html_path=self.output_dir / f"{name}.html",
        )

        records = [listing.to_dict() for listing in listings]
        with open(paths.json_path, 'w', encoding='utf-8') as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
        with open(paths.html_path, 'w', encoding='utf-8') as f:
            f.write(self.to_html(records))

        logger.info(f"Report written to {paths.html_path} ({len(records)} listing(s))")
        return paths

    def to_html(self, records: List[dict]) -> str:
        """Renders wire-format records as an HTML document."""
        header = "".join(self._header_cell(key, label) for key, label in COLUMNS)
        pages = [
            records[start:start + self.rows_per_page]
            for start in range(0, len(records), self.rows_per_page)
        ]
        bodies = "\n".join(
            f'<tbody class="page">{"".join(self._row(record) for record in page)}</tbody>'
            for page in pages
        )
        origins = ", ".join(sorted({record["origin"] for record in records})) or "-"
        return (
            "<!DOCTYPE html>\n<html lang=\"pt-BR\">\n<head>\n<meta charset=\"UTF-8\" />\n"
            "<title>AGREGADOR ALUGUEL</title>\n"
            "<style>body{font-family:Arial,sans-serif;padding:20px}"
            "table{border-collapse:collapse;width:100%}"
            "th,td{border:1px solid #ddd;padding:8px}</style>\n</head>\n<body>\n"
            f"<h1>{len(records)} im&oacute;veis</h1>\n<p>Origens: {html.escape(origins)}</p>\n"
            f"<table>\n<thead><tr>{header}</tr></thead>\n{bodies}\n</table>\n"
            "<button id=\"prev\">&lt;</button> <span id=\"page-label\"></span> "
            "<button id=\"next\">&gt;</button>\n"
            f"{_PAGE_SCRIPT}</body>\n</html>\n"
        )

    @staticmethod
    def _header_cell(key: str, label: str) -> str:
        if key in NUMERIC_COLUMNS:
            return f'<th data-numeric title="Ordenar">{label}</th>'
        return f"<th>{label}</th>"

    @staticmethod
    def _row(record: dict) -> str:
        cells = []
        for key, _ in COLUMNS:
            value = html.escape(str(record.get(key, "")))
            if key == "link":
                value = f'<a href="{value}" target="_blank">abrir</a>'
            cells.append(f"<td>{value}</td>")
        return f"<tr>{''.join(cells)}</tr>"
