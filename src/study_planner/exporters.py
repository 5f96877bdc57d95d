"""Export functionality for planning results."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .constants import TERMS_PER_YEAR
from .exceptions import PlannerError
from .models import TermType
from .planner.models import PlanResult, TermRow
from .planner.utils import term_label, term_year

# Plan sheet styling
FONT_HEADER = Font(name="Calibri", size=12, bold=True)
FONT_YEAR = Font(name="Calibri", size=11, bold=True)
FONT_CELL = Font(name="Calibri", size=11)
FILL_HEADER = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
FILL_SHORT_TERM = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
ALIGN_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
ALIGN_TOP = Alignment(horizontal="center", vertical="top", wrap_text=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

YEAR_COLUMN_WIDTH = 10.0
TERM_COLUMN_WIDTH = 22.0
ROW_HEIGHT_PER_COURSE = 15.0

_TERM_COLUMNS = [TermType.from_term_id(i) for i in range(TERMS_PER_YEAR)]


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(self, result: PlanResult, output_path: str | Path) -> None:
        """Export a plan result to file.

        Args:
            result: PlanResult to export
            output_path: Path to output file or directory
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: PlanResult, output_path: str | Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files)."""

    def export(self, result: PlanResult, output_path: str | Path) -> None:
        """Export a plan result to CSV files.

        Creates three files:
        - terms.csv: One row per planned course
        - summary.csv: Overall summary
        - issues.csv: Validation errors and warnings

        Args:
            result: PlanResult to export
            output_path: Path to output directory
        """
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(
            output_dir / "terms.csv",
            ["term_id", "year", "term", "code"],
            [
                {
                    "term_id": row.term_id,
                    "year": term_year(row.term_id),
                    "term": TermType.from_term_id(row.term_id).value,
                    "code": code,
                }
                for row in result.terms
                for code in row.course_codes
            ],
        )
        self._write_csv(output_dir / "summary.csv", ["metric", "value"], _summary_rows(result))
        self._write_csv(
            output_dir / "issues.csv", ["severity", "message"], _issue_rows(result)
        )

    def _write_csv(self, output_path: Path, fieldnames: list[str], rows: list[dict]) -> None:
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    def export(self, result: PlanResult, output_path: str | Path) -> None:
        """Export a plan result to an Excel file.

        Creates workbook with sheets:
        - Plan: One row per academic year, one column per term
        - Summary: Overall summary
        - Issues: Validation errors and warnings

        Args:
            result: PlanResult to export
            output_path: Path to output Excel file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            self._export_plan_sheet(result, writer)
            self._export_summary_sheet(result, writer)
            self._export_issues_sheet(result, writer)

    def _export_plan_sheet(self, result: PlanResult, writer: pd.ExcelWriter) -> None:
        """Export the year-by-term grid and style it."""
        grid: dict[int, dict[str, str]] = {}
        for row in result.terms:
            column = TermType.from_term_id(row.term_id).display_name
            grid.setdefault(term_year(row.term_id), {})[column] = "\n".join(row.course_codes)

        rows = []
        for year in range(1, max(grid, default=0) + 1):
            cells = grid.get(year, {})
            rows.append(
                {"Year": f"Y{year}"}
                | {t.display_name: cells.get(t.display_name, "") for t in _TERM_COLUMNS}
            )

        columns = ["Year", *(t.display_name for t in _TERM_COLUMNS)]
        df = pd.DataFrame(rows, columns=columns)
        df.to_excel(writer, sheet_name="Plan", index=False)

        self._style_plan_sheet(writer.sheets["Plan"], df)

    def _style_plan_sheet(self, ws, df: pd.DataFrame) -> None:
        """Apply fonts, borders and sizes to the Plan sheet.

        Args:
            ws: openpyxl worksheet written by pandas
            df: Data written to the sheet
        """
        ws.column_dimensions["A"].width = YEAR_COLUMN_WIDTH
        for index in range(2, len(_TERM_COLUMNS) + 2):
            ws.column_dimensions[get_column_letter(index)].width = TERM_COLUMN_WIDTH

        for cell in ws[1]:
            cell.font = FONT_HEADER
            cell.fill = FILL_HEADER
            cell.alignment = ALIGN_CENTER
            cell.border = THIN_BORDER

        for row_idx in range(2, len(df) + 2):
            longest = 1
            for col_idx in range(1, len(df.columns) + 1):
                cell = ws.cell(row=row_idx, column=col_idx)
                cell.border = THIN_BORDER
                if col_idx == 1:
                    cell.font = FONT_YEAR
                    cell.alignment = ALIGN_CENTER
                    continue
                cell.font = FONT_CELL
                cell.alignment = ALIGN_TOP
                if _TERM_COLUMNS[col_idx - 2].is_special:
                    cell.fill = FILL_SHORT_TERM
                if cell.value:
                    longest = max(longest, str(cell.value).count("\n") + 1)
            ws.row_dimensions[row_idx].height = ROW_HEIGHT_PER_COURSE * longest + 5

    def _export_summary_sheet(self, result: PlanResult, writer: pd.ExcelWriter) -> None:
        rows = [
            {"Metric": r["metric"].replace("_", " ").title(), "Value": r["value"]}
            for r in _summary_rows(result)
        ]
        df = pd.DataFrame(rows)
        df.to_excel(writer, sheet_name="Summary", index=False)

    def _export_issues_sheet(self, result: PlanResult, writer: pd.ExcelWriter) -> None:
        rows = [
            {"Severity": r["severity"], "Message": r["message"]} for r in _issue_rows(result)
        ]
        df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=["Severity", "Message"])
        df.to_excel(writer, sheet_name="Issues", index=False)


def _summary_rows(result: PlanResult) -> list[dict]:
    stats = result.validation.stats
    last_term = result.terms[-1].term_id if result.terms else None
    return [
        {"metric": "generation_date", "value": result.generation_date},
        {"metric": "targets", "value": ", ".join(result.targets)},
        {"metric": "exempted", "value": ", ".join(result.exempted)},
        {"metric": "max_credits", "value": result.max_credits},
        {"metric": "use_special_terms", "value": result.use_special_terms},
        {"metric": "total_terms", "value": stats.total_terms},
        {"metric": "total_courses", "value": stats.total_courses},
        {"metric": "total_credits", "value": stats.total_credits},
        {"metric": "max_term_credits", "value": stats.max_term_credits},
        {"metric": "last_term", "value": term_label(last_term) if last_term is not None else ""},
        {"metric": "is_valid", "value": result.validation.is_valid},
    ]


def _issue_rows(result: PlanResult) -> list[dict]:
    rows = [{"severity": "error", "message": e} for e in result.validation.errors]
    rows.extend({"severity": "warning", "message": w} for w in result.validation.warnings)
    return rows


def get_exporter(format_type: str) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type]()


def load_plan_json(input_path: Path | str) -> list[TermRow]:
    """Load term rows from an exported plan.

    Accepts the JSON written by JSONExporter, a bare list of rows, or the web
    planner's ``{"semesters": [{"id": ..., "moduleCodes": [...]}]}`` shape.

    Args:
        input_path: Path to the plan JSON

    Returns:
        Term rows sorted by term id

    Raises:
        PlannerError: If no term rows can be found
    """
    with open(input_path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("terms", data.get("semesters"))
    if not isinstance(data, list):
        raise PlannerError(f"No term rows found in '{input_path}'")

    rows = [TermRow.from_dict(item) for item in data]
    return sorted(rows, key=lambda r: r.term_id)
