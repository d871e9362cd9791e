"""
Excel export helper wrapping xlsxwriter.

Provides ``ExcelExporter``: a builder that renders a budget report as a
styled workbook in memory and returns its bytes for streaming via FastAPI's
``StreamingResponse``.

Usage example::

    exporter = ExcelExporter(title="Presupuesto por facultad")
    exporter.add_header()
    exporter.add_totals_row({"Disponibilidad": 150.0})
    exporter.add_data_table(headers, rows)
    file_bytes = exporter.finalize()

Design notes
------------
- Uses ``xlsxwriter`` in in-memory mode (``BytesIO``).
- Column widths are sized to the longest value per column (capped at 60).
- Monetary values use the ``#,##0.00`` number format.
- Every other data row is shaded light grey.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Any, Sequence

import xlsxwriter

_COLOR_PRIMARY = "#1D4ED8"
_COLOR_WHITE = "#FFFFFF"
_COLOR_LIGHT_GREY = "#F3F4F6"
_COLOR_SUBHEADER_BG = "#1E3A5F"
_COLOR_BORDER = "#E5E7EB"

_MAX_COL_WIDTH = 60
_MIN_COL_WIDTH = 8
_MIN_HEADER_COLS = 6


class ExcelExporter:
    """Single-sheet workbook builder for budget report exports.

    Args:
        title: Report title written in the merged header row.
        filters: Applied filter labels shown under the title,
                 e.g. ``{"Reporte": "por_facultad"}``.
        sheet_name: Name of the worksheet tab (default: ``"Reporte"``).
    """

    def __init__(
        self,
        title: str,
        filters: dict[str, str] | None = None,
        sheet_name: str = "Reporte",
    ) -> None:
        self._title = title
        self._filters = filters or {}

        self._buffer = io.BytesIO()
        self._workbook = xlsxwriter.Workbook(self._buffer, {"in_memory": True})
        self._worksheet = self._workbook.add_worksheet(sheet_name)

        self._current_row: int = 0
        self._num_cols: int = 1
        self._formats: dict[str, Any] = self._build_formats()

    # -----------------------------------------------------------------------
    # Format factory
    # -----------------------------------------------------------------------

    def _build_formats(self) -> dict[str, Any]:
        wb = self._workbook
        base_cell = {
            "font_size": 9,
            "font_color": "#111827",
            "valign": "vcenter",
            "border": 1,
            "border_color": _COLOR_BORDER,
        }
        money = {"align": "right", "num_format": "#,##0.00"}

        return {
            "header_main": wb.add_format({
                "bold": True,
                "font_size": 16,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_PRIMARY,
                "align": "center",
                "valign": "vcenter",
            }),
            "header_sub": wb.add_format({
                "font_size": 10,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_SUBHEADER_BG,
                "align": "center",
                "valign": "vcenter",
            }),
            "filter_key": wb.add_format({
                "bold": True,
                "font_size": 9,
                "bg_color": "#E5E7EB",
                "align": "right",
            }),
            "filter_value": wb.add_format({
                "font_size": 9,
                "bg_color": "#F9FAFB",
                "align": "left",
            }),
            "total_label": wb.add_format({
                "bold": True,
                "font_size": 10,
                "bg_color": "#EFF6FF",
                "align": "center",
                "border": 1,
                "border_color": "#BFDBFE",
            }),
            "total_value": wb.add_format({
                "bold": True,
                "font_size": 12,
                "font_color": _COLOR_PRIMARY,
                "bg_color": "#EFF6FF",
                "align": "center",
                "num_format": "#,##0.00",
                "border": 1,
                "border_color": "#BFDBFE",
            }),
            "col_header": wb.add_format({
                "bold": True,
                "font_size": 10,
                "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_SUBHEADER_BG,
                "align": "center",
                "valign": "vcenter",
                "border": 1,
                "text_wrap": True,
            }),
            "data_plain": wb.add_format({**base_cell, "bg_color": _COLOR_WHITE, "align": "left"}),
            "data_alt": wb.add_format({**base_cell, "bg_color": _COLOR_LIGHT_GREY, "align": "left"}),
            "data_number": wb.add_format({**base_cell, **money, "bg_color": _COLOR_WHITE}),
            "data_number_alt": wb.add_format({**base_cell, **money, "bg_color": _COLOR_LIGHT_GREY}),
        }

    # -----------------------------------------------------------------------
    # Public builder methods
    # -----------------------------------------------------------------------

    def add_header(self) -> "ExcelExporter":
        """Write the title row, the generation timestamp and one row per filter.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        last_col = max(self._num_cols, _MIN_HEADER_COLS) - 1

        ws.set_row(self._current_row, 32)
        ws.merge_range(
            self._current_row, 0, self._current_row, last_col,
            self._title, self._formats["header_main"],
        )
        self._current_row += 1

        gen_ts = datetime.now(timezone.utc).strftime("%d/%m/%Y %H:%M UTC")
        ws.merge_range(
            self._current_row, 0, self._current_row, last_col,
            f"Generado: {gen_ts}", self._formats["header_sub"],
        )
        self._current_row += 1

        for key, value in self._filters.items():
            ws.write(self._current_row, 0, key, self._formats["filter_key"])
            ws.merge_range(
                self._current_row, 1, self._current_row, last_col,
                value, self._formats["filter_value"],
            )
            self._current_row += 1

        self._current_row += 1
        return self

    def add_totals_row(self, totals: dict[str, Any]) -> "ExcelExporter":
        """Write labelled grand totals side by side (label above value).

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        for col, (label, value) in enumerate(totals.items()):
            ws.write(self._current_row, col, label, self._formats["total_label"])
            ws.write(self._current_row + 1, col, value, self._formats["total_value"])

        self._current_row += 3  # label row + value row + blank separator
        return self

    def add_data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        numeric_cols: set[int] | None = None,
    ) -> "ExcelExporter":
        """Write a styled data table with alternating row shading.

        Args:
            headers: Column header strings.
            rows: Data rows, each as long as ``headers``.
            numeric_cols: Zero-based indices of money columns.  When
                ``None`` they are detected from the first row's value types.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        self._num_cols = len(headers)

        if numeric_cols is None:
            numeric_cols = {
                ci for ci, val in enumerate(rows[0] if rows else [])
                if isinstance(val, float)
            }

        col_widths: list[int] = [len(str(h)) for h in headers]

        ws.set_row(self._current_row, 20)
        for ci, hdr in enumerate(headers):
            ws.write(self._current_row, ci, hdr, self._formats["col_header"])
        self._current_row += 1

        for ri, data_row in enumerate(rows):
            is_alt = ri % 2 == 1
            for ci, cell_val in enumerate(data_row):
                if ci in numeric_cols:
                    fmt = self._formats["data_number_alt" if is_alt else "data_number"]
                else:
                    fmt = self._formats["data_alt" if is_alt else "data_plain"]
                ws.write(self._current_row, ci, cell_val, fmt)
                cell_str = "" if cell_val is None else str(cell_val)
                col_widths[ci] = min(_MAX_COL_WIDTH, max(col_widths[ci], len(cell_str)))
            self._current_row += 1

        for ci, width in enumerate(col_widths):
            ws.set_column(ci, ci, max(width + 2, _MIN_COL_WIDTH))

        return self

    def finalize(self) -> bytes:
        """Close the workbook and return the ``.xlsx`` bytes.

        The exporter must not be reused afterwards.
        """
        self._workbook.close()
        self._buffer.seek(0)
        return self._buffer.read()
