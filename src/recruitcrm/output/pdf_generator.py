"""PDF generation for finance and payroll reports.

This module creates printable PDF reports showing:
- The year/month/week/day finance table with totals per period
- A monthly profit chart
- Monthly payroll with wage and bonus breakdowns
"""

from io import BytesIO
from pathlib import Path
from typing import Iterable, Union

from recruitcrm.compensation.payroll import PayrollLine
from recruitcrm.domain.numbers import ZERO, format_money
from recruitcrm.reporting.aggregator import AggregationBucket, BucketLevel, month_label

# Row shading per period level (RGB tuples, 0-1 scale)
COLORS = {
    BucketLevel.YEAR: (0.75, 0.82, 0.92),  # Blue
    BucketLevel.MONTH: (0.85, 0.9, 0.96),  # Light blue
    BucketLevel.WEEK: (0.94, 0.94, 0.94),  # Light gray
    BucketLevel.DAY: (1.0, 1.0, 1.0),  # White
    "profit": (0.4, 0.7, 0.4),  # Green
    "loss": (0.85, 0.4, 0.4),  # Red
}

_DEPTHS = {
    BucketLevel.YEAR: 0,
    BucketLevel.MONTH: 1,
    BucketLevel.WEEK: 2,
    BucketLevel.DAY: 3,
}

# (header, width) for the finance table
_COLUMNS = [
    ("Period", 170),
    ("Shifts", 50),
    ("Score", 50),
    ("Box2", 50),
    ("Box4", 50),
    ("Income", 85),
    ("Wages", 85),
    ("Bonus", 85),
    ("Profit", 85),
]


def _require_reportlab():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


class PDFGenerator:
    """Generates printable PDF finance and payroll reports.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(year_bucket, "finances-2025.pdf")
        >>> generator.generate_payroll("2025-09", payroll, "payroll.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        row_height: float = 16,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.row_height = row_height

    def generate(
        self,
        bucket: AggregationBucket,
        output_path: Union[str, Path],
        depth: BucketLevel = BucketLevel.DAY,
        include_chart: bool = True,
    ) -> None:
        """Generate the finance report and save it to a file.

        Args:
            bucket: Root bucket (normally a year).
            output_path: Path to save the PDF.
            depth: Finest level to include in the table.
            include_chart: Whether to add the monthly profit chart page.
        """
        canvas, pagesize = _require_reportlab()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw_finance(c, bucket, depth, include_chart)
        c.save()

    def generate_to_buffer(
        self,
        bucket: AggregationBucket,
        depth: BucketLevel = BucketLevel.DAY,
        include_chart: bool = True,
    ) -> BytesIO:
        """Generate the finance report and return it as a bytes buffer.

        Returns:
            BytesIO buffer containing PDF data.
        """
        canvas, pagesize = _require_reportlab()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw_finance(c, bucket, depth, include_chart)
        c.save()
        buffer.seek(0)
        return buffer

    def generate_payroll(
        self,
        pay_month: str,
        payroll: Iterable[PayrollLine],
        output_path: Union[str, Path, None] = None,
    ) -> BytesIO:
        """Generate the payroll report.

        Args:
            pay_month: Month being paid, ``YYYY-MM``.
            payroll: Payroll lines.
            output_path: Optional file to write as well.

        Returns:
            BytesIO buffer containing PDF data.
        """
        canvas, pagesize = _require_reportlab()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw_payroll(c, pay_month, list(payroll))
        c.save()
        buffer.seek(0)
        if output_path is not None:
            Path(output_path).write_bytes(buffer.getvalue())
        return buffer

    def _draw_finance(
        self,
        c,
        bucket: AggregationBucket,
        depth: BucketLevel,
        include_chart: bool,
    ) -> None:
        max_depth = _DEPTHS[depth]
        rows = [node for node in bucket.walk() if _DEPTHS[node.level] <= max_depth]

        header_height = 60
        footer_height = 30
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / self.row_height))
        total_pages = (len(rows) + rows_per_page - 1) // rows_per_page

        for page_start in range(0, len(rows), rows_per_page):
            self._draw_header(c, f"Finances - {bucket.label}", bucket)
            y = self.page_height - self.margin - header_height
            self._draw_column_headers(c, y)

            for node in rows[page_start : page_start + rows_per_page]:
                y -= self.row_height
                self._draw_bucket_row(c, node, y)

            page_num = page_start // rows_per_page + 1
            self._draw_page_number(c, page_num, total_pages)
            c.showPage()

        if include_chart:
            self._draw_profit_chart_page(c, bucket)

    def _draw_header(self, c, title: str, bucket: AggregationBucket) -> None:
        """Draw page header with title and headline totals."""
        values = bucket.totals.display()
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, title)

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Shifts: {values['shifts']}   Income: {values['income']}   "
            f"Wages: {values['wages']}   Bonus: {values['bonus']}   "
            f"Profit: {values['profit']}",
        )

    def _draw_column_headers(self, c, y: float) -> None:
        c.setFont("Helvetica-Bold", 9)
        x = self.margin
        for header, width in _COLUMNS:
            if header == "Period":
                c.drawString(x + 2, y + 4, header)
            else:
                c.drawRightString(x + width - 4, y + 4, header)
            x += width
        c.setStrokeColorRGB(0.3, 0.3, 0.3)
        c.line(self.margin, y, x, y)

    def _draw_bucket_row(self, c, bucket: AggregationBucket, y: float) -> None:
        """Draw one period row of the finance table."""
        totals = bucket.totals
        values = totals.display()
        cells = [
            "    " * _DEPTHS[bucket.level] + bucket.label,
            str(values["shifts"]),
            str(values["score"]),
            str(totals.box2),
            str(totals.box4),
            values["income"],
            values["wages"],
            values["bonus"],
            values["profit"],
        ]

        table_width = sum(width for _, width in _COLUMNS)
        c.setFillColorRGB(*COLORS[bucket.level])
        c.rect(self.margin, y, table_width, self.row_height, fill=1, stroke=0)

        c.setFillColorRGB(0, 0, 0)
        font = "Helvetica-Bold" if bucket.level in (BucketLevel.YEAR, BucketLevel.MONTH) else "Helvetica"
        c.setFont(font, 8)
        x = self.margin
        for (header, width), text in zip(_COLUMNS, cells):
            if header == "Period":
                c.drawString(x + 2, y + 4, text[:36])
            else:
                if header == "Profit" and totals.profit < ZERO:
                    c.setFillColorRGB(*COLORS["loss"])
                c.drawRightString(x + width - 4, y + 4, text)
                c.setFillColorRGB(0, 0, 0)
            x += width

    def _draw_page_number(self, c, page_num: int, total_pages: int) -> None:
        c.setFont("Helvetica", 9)
        c.drawCentredString(
            self.page_width / 2,
            self.margin - 10,
            f"Page {page_num} of {total_pages}",
        )

    def _draw_profit_chart_page(self, c, bucket: AggregationBucket) -> None:
        """Draw a bar chart of profit per month."""
        months = [child for child in bucket.children if child.level is BucketLevel.MONTH]

        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Monthly Profit - {bucket.label}",
        )
        if not months:
            c.setFont("Helvetica", 10)
            c.drawString(self.margin, self.page_height - self.margin - 50, "No shifts recorded.")
            c.showPage()
            return

        x = self.margin + 40
        width = self.page_width - 2 * self.margin - 60
        height = self.page_height - 2 * self.margin - 120
        y = self.margin + 40 + height / 2  # zero line

        largest = max(abs(m.totals.profit) for m in months) or 1
        bar_width = width / len(months)

        # Axes
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(1)
        c.line(x, y - height / 2, x, y + height / 2)
        c.line(x, y, x + width, y)

        c.setFont("Helvetica", 7)
        for i, month in enumerate(months):
            profit = month.totals.profit
            bar_height = float(profit / largest) * (height / 2)
            c.setFillColorRGB(*(COLORS["profit"] if profit >= ZERO else COLORS["loss"]))
            c.rect(x + i * bar_width + 2, y, bar_width - 4, bar_height, fill=1, stroke=0)

            c.setFillColorRGB(0, 0, 0)
            label_y = y - height / 2 - 12
            c.drawCentredString(x + (i + 0.5) * bar_width, label_y, month.label[:3])
            c.drawCentredString(
                x + (i + 0.5) * bar_width,
                y + bar_height + (4 if profit >= ZERO else -10),
                format_money(profit),
            )

        c.drawRightString(x - 5, y - 3, "0")
        c.showPage()

    def _draw_payroll(self, c, pay_month: str, payroll: list[PayrollLine]) -> None:
        """Draw payroll pages, one block per recruiter."""
        title = f"Payroll - {month_label(pay_month)}"
        top = self.page_height - self.margin - 60

        def new_page() -> float:
            c.setFont("Helvetica-Bold", 16)
            c.drawString(self.margin, self.page_height - self.margin - 20, title)
            total = sum((line.total for line in payroll), ZERO)
            c.setFont("Helvetica", 10)
            c.drawString(
                self.margin,
                self.page_height - self.margin - 35,
                f"Recruiters: {len(payroll)}   Total: {format_money(total)}",
            )
            return top

        y = new_page()
        for line in payroll:
            needed = self.row_height * (2 + len(line.wage_shifts) + len(line.bonus_shifts))
            if y - needed < self.margin + 20:
                c.showPage()
                y = new_page()

            recruiter = line.recruiter
            c.setFillColorRGB(*COLORS[BucketLevel.MONTH])
            c.rect(self.margin, y - 4, self.page_width - 2 * self.margin, self.row_height, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 10)
            c.drawString(
                self.margin + 4, y,
                f"{recruiter.name}  ({recruiter.role.acronym}, crew {recruiter.crew_code or '-'})",
            )
            c.drawRightString(
                self.page_width - self.margin - 4, y,
                f"Wages {format_money(line.wages)}   Bonus {format_money(line.bonus)}   "
                f"Total {format_money(line.total)}",
            )
            y -= self.row_height

            c.setFont("Helvetica", 8)
            for shift in line.wage_shifts:
                c.drawString(
                    self.margin + 20, y,
                    f"Wage   {shift.date_iso}   {shift.location[:30]}   "
                    f"{shift.hours} h x {format_money(shift.rate)} = {format_money(shift.wages)}",
                )
                y -= self.row_height
            for shift in line.bonus_shifts:
                c.drawString(
                    self.margin + 20, y,
                    f"Bonus  {shift.date_iso}   {shift.location[:30]}   "
                    f"box2 {shift.box2} x {shift.multiplier} = {format_money(shift.bonus)}",
                )
                y -= self.row_height
            y -= self.row_height / 2

        c.showPage()
