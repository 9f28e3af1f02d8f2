"""
Plain-text rendering of payroll reports for the command line.
"""

from datetime import date

from core.normalize import extract_first_words
from models.matching import UncertainMatch
from models.payroll import PayrollEntry, PayrollReport


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def format_currency(amount: float) -> str:
    return f"€{amount:,.2f}"


def format_entry_line(entry: PayrollEntry) -> str:
    return (
        f"  {entry.client_name:<32} {entry.sessions_count:>3} x {format_currency(entry.client_price):>9}"
        f"  = {format_currency(entry.total_revenue):>11}"
        f"  (employee {format_currency(entry.employee_earnings)},"
        f" company {format_currency(entry.company_earnings)})"
    )


def format_uncertain_match(index: int, match: UncertainMatch) -> list[str]:
    when = ""
    if match.event_start:
        when = f" [{format_date_display(match.event_start)} {match.event_start:%H:%M}]"
    lines = [f"  {index}. '{match.event_title}'{when}"]
    if match.candidates:
        for candidate_idx, candidate in enumerate(match.candidates, start=1):
            lines.append(
                # Roster names are unique on their first two words
                f"       {candidate_idx}) {extract_first_words(candidate.client_name)}"
                f" ({candidate.strategy.value})"
            )
    else:
        lines.append("       no candidate clients")
    return lines


def format_payroll_report(
    report: PayrollReport, uncertain_matches: tuple[UncertainMatch, ...] = ()
) -> str:
    """Render the report, followed by any matches still awaiting a decision."""
    lines = [
        f"Payroll Report - {report.employee.name}",
        f"Period: {format_date_display(report.period_start)} - {format_date_display(report.period_end)}",
        "",
    ]

    if report.entries:
        lines.append("Clients:")
        lines.extend(format_entry_line(entry) for entry in report.entries)
    else:
        lines.append("No billable client sessions in this period.")

    if report.supervision_entries:
        lines.append("")
        lines.append("Supervision:")
        lines.extend(format_entry_line(entry) for entry in report.supervision_entries)

    summary = report.summary
    lines.extend(
        [
            "",
            "Summary:",
            f"  Total sessions:       {summary.total_sessions}",
            f"  Total revenue:        {format_currency(summary.total_revenue)}",
            f"  Employee earnings:    {format_currency(summary.employee_earnings)}",
            f"  Company earnings:     {format_currency(summary.company_earnings)}",
            f"  Supervision revenue:  {format_currency(summary.supervision_revenue)}",
        ]
    )

    if uncertain_matches:
        lines.append("")
        lines.append(f"Uncertain matches ({len(uncertain_matches)}):")
        for idx, match in enumerate(uncertain_matches, start=1):
            lines.extend(format_uncertain_match(idx, match))

    return "\n".join(lines)
