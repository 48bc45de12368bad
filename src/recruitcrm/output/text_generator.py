"""Plain-text report output.

This module renders the finance period tree, monthly payroll and the
recruiter roster as fixed-width text suitable for a terminal or a .txt
file.
"""

from pathlib import Path
from typing import Iterable, Union

from recruitcrm.compensation.payroll import PayrollLine
from recruitcrm.domain.numbers import ZERO, format_money
from recruitcrm.reporting.aggregator import AggregationBucket, BucketLevel, month_label
from recruitcrm.reporting.recruiter_stats import RecruiterSummary

_DEPTHS = {
    BucketLevel.YEAR: 0,
    BucketLevel.MONTH: 1,
    BucketLevel.WEEK: 2,
    BucketLevel.DAY: 3,
}


class TextReportGenerator:
    """Generates text reports from aggregation and payroll results.

    Example:
        >>> generator = TextReportGenerator()
        >>> print(generator.generate_to_string(year_bucket, depth=BucketLevel.WEEK))
    """

    def generate(
        self,
        bucket: AggregationBucket,
        output_path: Union[str, Path],
        depth: BucketLevel = BucketLevel.DAY,
    ) -> str:
        """Generate the finance report and save it to a file.

        Args:
            bucket: Root bucket (normally a year).
            output_path: Path to save the text file.
            depth: Finest level to include.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(bucket, depth)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        bucket: AggregationBucket,
        depth: BucketLevel = BucketLevel.DAY,
    ) -> str:
        """Generate the finance report and return it as a string."""
        lines = []

        lines.append("=" * 96)
        lines.append(f"FINANCES - {bucket.label}")
        lines.append("=" * 96)
        lines.append(
            f"{'Period':<24} {'Shifts':>6} {'Score':>6} {'Box2':>6} {'Box4':>6} "
            f"{'Income':>10} {'Wages':>10} {'Bonus':>10} {'Profit':>10}"
        )
        lines.append("-" * 96)

        max_depth = _DEPTHS[depth]
        for node in bucket.walk():
            if _DEPTHS[node.level] > max_depth:
                continue
            lines.append(self._bucket_line(node))
            if node.level is BucketLevel.MONTH and max_depth > 1:
                lines.append("")

        lines.append("-" * 96)
        return "\n".join(lines) + "\n"

    def payroll_to_string(self, pay_month: str, payroll: Iterable[PayrollLine]) -> str:
        """Render monthly payroll with per-shift breakdowns."""
        payroll = list(payroll)
        lines = []

        lines.append("=" * 80)
        lines.append(f"PAYROLL - {month_label(pay_month)}")
        lines.append("=" * 80)
        lines.append(f"{'Recruiter':<28} {'Crew':>6} {'Wages':>12} {'Bonus':>12} {'Total':>12}")
        lines.append("-" * 80)

        for line in payroll:
            recruiter = line.recruiter
            lines.append(
                f"{recruiter.name[:28]:<28} {recruiter.crew_code or '-':>6} "
                f"{format_money(line.wages):>12} {format_money(line.bonus):>12} "
                f"{format_money(line.total):>12}"
            )
            for shift in line.wage_shifts:
                lines.append(
                    f"    wage  {shift.date_iso}  {shift.location[:20]:<20} "
                    f"{shift.hours}h x {format_money(shift.rate)} = {format_money(shift.wages)}"
                )
            for shift in line.bonus_shifts:
                lines.append(
                    f"    bonus {shift.date_iso}  {shift.location[:20]:<20} "
                    f"box2 {shift.box2} x{shift.multiplier} = {format_money(shift.bonus)}"
                )

        lines.append("-" * 80)
        total = sum((line.total for line in payroll), ZERO)
        lines.append(f"{'Total':<36}{format_money(total):>44}")
        return "\n".join(lines) + "\n"

    def roster_to_string(self, summaries: Iterable[RecruiterSummary]) -> str:
        """Render the ranked recruiter roster."""
        lines = []
        lines.append(
            f"{'Rank':<5} {'Name':<28} {'Crew':>6} {'Last scores':<20} {'Box2%':>7} {'Box4%':>7}"
        )
        lines.append("-" * 78)
        for summary in summaries:
            recruiter = summary.recruiter
            scores = " ".join(str(s) for s in summary.last_scores) or "-"
            name = recruiter.name + (" (inactive)" if recruiter.is_inactive else "")
            lines.append(
                f"{summary.rank:<5} {name[:28]:<28} {recruiter.crew_code or '-':>6} "
                f"{scores:<20} {summary.box2_percent:>6.1f}% {summary.box4_percent:>6.1f}%"
            )
        return "\n".join(lines) + "\n"

    def _bucket_line(self, bucket: AggregationBucket) -> str:
        values = bucket.totals.display()
        label = "  " * _DEPTHS[bucket.level] + bucket.label
        return (
            f"{label[:24]:<24} {values['shifts']:>6} {values['score']:>6} "
            f"{bucket.totals.box2:>6} {bucket.totals.box4:>6} "
            f"{values['income']:>10} {values['wages']:>10} "
            f"{values['bonus']:>10} {values['profit']:>10}"
        )
