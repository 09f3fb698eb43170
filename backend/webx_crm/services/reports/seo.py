"""Extract an SEO report outline from an uploaded CSV export.

The upload is a flat CSV with a header row. When it carries a ``Tab``
column (as produced by exporting a multi-sheet workbook into one file),
rows are grouped into one section per tab; otherwise everything lands in a
single "SEO Data" section. Client, website and reporting period are read
from the first row using the column names the common SEO tools export.
"""

import csv
import io
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger()

TAB_COLUMN = "Tab"
DEFAULT_SECTION = "SEO Data"
BLANK_TAB_SECTION = "Data"

CLIENT_COLUMNS = ("Client", "Client Name")
WEBSITE_COLUMNS = ("Website", "Domain", "Website URL")
PERIOD_COLUMNS = ("Month", "Report Month", "Period")


class ReportError(ValueError):
    """The upload cannot be turned into a report."""


@dataclass
class ReportSection:
    """One tab of the report."""

    name: str
    columns: list[str]
    rows: list[list[str]] = field(default_factory=list)


@dataclass
class SeoReport:
    """Everything needed to lay out the report document."""

    client_name: str
    website: str
    period: str
    sections: list[ReportSection]

    @property
    def row_count(self) -> int:
        return sum(len(section.rows) for section in self.sections)

    def to_dict(self) -> dict[str, Any]:
        return {
            "client_name": self.client_name,
            "website": self.website,
            "period": self.period,
            "row_count": self.row_count,
            "sections": [
                {"name": s.name, "columns": s.columns, "rows": s.rows} for s in self.sections
            ],
        }


def _first_present(row: dict[str, str], names: Iterable[str]) -> str:
    for name in names:
        value = row.get(name)
        if value:
            return value
    return ""


def _read_records(content: bytes) -> tuple[list[str], list[dict[str, str]]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ReportError("Invalid CSV format") from e

    reader = csv.reader(io.StringIO(text), strict=True)
    try:
        lines = [line for line in reader if any(cell.strip() for cell in line)]
    except csv.Error as e:
        raise ReportError("Invalid CSV format") from e

    if not lines:
        raise ReportError("CSV contains no data rows")

    header = [name.strip() for name in lines[0]]
    if not any(header) or len(set(header)) != len(header):
        raise ReportError("Invalid CSV format")

    records = []
    for line in lines[1:]:
        if len(line) != len(header):
            raise ReportError("Invalid CSV format")
        records.append({name: cell.strip() for name, cell in zip(header, line, strict=True)})
    return header, records


def parse_seo_csv(content: bytes) -> SeoReport:
    """Parse an uploaded CSV into report sections.

    Raises:
        ReportError: the file is not valid UTF-8 CSV, its rows do not match
            the header, or it has no data rows.
    """
    header, records = _read_records(content)
    if not records:
        raise ReportError("CSV contains no data rows")

    has_tabs = TAB_COLUMN in header
    columns = [name for name in header if name != TAB_COLUMN] if has_tabs else header

    sections: dict[str, ReportSection] = {}
    for record in records:
        name = (record.get(TAB_COLUMN) or BLANK_TAB_SECTION) if has_tabs else DEFAULT_SECTION
        section = sections.setdefault(name, ReportSection(name=name, columns=columns))
        section.rows.append([record[column] for column in columns])

    first = records[0]
    report = SeoReport(
        client_name=_first_present(first, CLIENT_COLUMNS),
        website=_first_present(first, WEBSITE_COLUMNS),
        period=_first_present(first, PERIOD_COLUMNS),
        sections=list(sections.values()),
    )
    logger.info(
        "seo_report_parsed",
        sections=len(report.sections),
        rows=report.row_count,
    )
    return report
