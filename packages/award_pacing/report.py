"""Human-readable pacing report rendered with ``rich``.

Every section is driven by a field of the :class:`~award_pacing.models.Summary`;
sections without data are skipped. Long lists (missing periods, alerts) are
truncated to :data:`LIST_LIMIT` rows with an "...and N more" line.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import Breakdown, Config, PaceFlag, PeriodDelta, Summary, TargetVariance
from .projection import RECENT_WINDOW
from .variance import PACE_LOWER, PACE_UPPER

LIST_LIMIT = 6
_HUNDRED = Decimal(100)


def _money(value: Decimal) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _signed_money(value: Decimal) -> str:
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):,.2f}"


def _pct(ratio: Decimal, places: int = 0) -> str:
    return f"{ratio * _HUNDRED:.{places}f}%"


def _heading(console: Console, title: str) -> None:
    console.print()
    console.print(f"[bold]{title}[/bold]")


def _more(console: Console, total: int) -> None:
    if total > LIST_LIMIT:
        console.print(f"...and {total - LIST_LIMIT} more")


def _headline(summary: Summary, console: Console) -> None:
    stats = summary.award_stats
    console.print("[bold]Award Pacing Summary[/bold]")
    console.print(f"Records: {summary.total_records}")
    if summary.start_date and summary.end_date:
        console.print(
            f"Date range: {summary.start_date:%b %d, %Y} - {summary.end_date:%b %d, %Y}"
        )
    console.print(f"Total spent: {_money(summary.total_amount)}")
    console.print(
        f"Expected ({len(summary.period_entries)} periods): {_money(summary.expected_total)}"
    )
    console.print(f"Variance: {_money(summary.variance)}")
    console.print(f"Average award: {_money(stats.mean)}")
    console.print(f"Median award: {_money(stats.median)}")


def _filters(config: Config, console: Console) -> None:
    if not (
        config.start_date or config.end_date or config.category_filters or config.cohort_filters
    ):
        return
    _heading(console, "Filters")
    if config.start_date:
        console.print(f"Start date: {config.start_date:%b %d, %Y}")
    if config.end_date:
        console.print(f"End date: {config.end_date:%b %d, %Y}")
    if config.category_filters:
        console.print("Categories: " + escape(", ".join(config.category_filters)))
    if config.cohort_filters:
        console.print("Cohorts: " + escape(", ".join(config.cohort_filters)))


def _period_breakdown(summary: Summary, console: Console) -> None:
    _heading(console, "Period Breakdown")
    table = Table(show_edge=False)
    for col in ("Period", "Count", "Actual", "Expected", "Pace", "Avg Award"):
        table.add_column(col, justify="left" if col == "Period" else "right")
    expected = summary.expected_per_period
    for entry in summary.period_entries:
        actual = summary.actual_for(entry)
        count = summary.period_counts.get(entry.key, 0)
        pace = actual / expected if expected > 0 else Decimal(0)
        average = actual / count if count else Decimal(0)
        table.add_row(
            entry.key, str(count), _money(actual), _money(expected), _pct(pace), _money(average)
        )
    console.print(table)


def _cumulative(summary: Summary, console: Console) -> None:
    if not summary.cumulative:
        return
    _heading(console, "Cumulative Pace")
    table = Table(show_edge=False)
    for col in ("Period", "Actual", "Expected", "Variance"):
        table.add_column(col, justify="left" if col == "Period" else "right")
    for row in summary.cumulative:
        table.add_row(row.entry.key, _money(row.actual), _money(row.expected), _money(row.variance))
    console.print(table)


def _alerts_table(flags: Sequence[PaceFlag], console: Console) -> None:
    table = Table(show_edge=False)
    for col in ("Period", "Actual", "Expected", "Pace"):
        table.add_column(col, justify="left" if col == "Period" else "right")
    for flag in flags[:LIST_LIMIT]:
        table.add_row(flag.period, _money(flag.actual), _money(flag.expected), _pct(flag.pace))
    console.print(table)
    _more(console, len(flags))


def _seasonality(summary: Summary, console: Console) -> None:
    if summary.weighted_expectations is None or summary.weighted_expected_total is None:
        return
    _heading(console, "Seasonality-Weighted Pace")
    console.print(f"Weighted expected: {_money(summary.weighted_expected_total)}")
    console.print(f"Weighted variance: {_money(summary.weighted_variance or Decimal(0))}")
    console.print(f"Weighted pace: {_pct(summary.weighted_pace or Decimal(0))}")
    if summary.weighted_pace_flags:
        _heading(
            console, f"Seasonality Alerts (outside {_pct(PACE_LOWER)}-{_pct(PACE_UPPER)})"
        )
        _alerts_table(summary.weighted_pace_flags, console)


def _missing(summary: Summary, console: Console) -> None:
    missing = summary.missing_periods
    if not missing:
        return
    _heading(console, "Missing Periods")
    console.print(f"Count: {len(missing)}")
    console.print(", ".join(e.key for e in missing[:LIST_LIMIT]))
    _more(console, len(missing))


def _streaks(summary: Summary, console: Console) -> None:
    if not summary.inactive_streaks:
        return
    _heading(console, "Inactive Streaks")
    table = Table(show_edge=False)
    for col in ("Start", "End", "Periods", "Expected", "Actual"):
        table.add_column(col, justify="left" if col in ("Start", "End") else "right")
    for streak in summary.inactive_streaks:
        table.add_row(
            streak.start.key,
            streak.end.key,
            str(streak.length),
            _money(streak.total_expected),
            _money(streak.total_actual),
        )
    console.print(table)


def _swing_line(delta: PeriodDelta) -> str:
    percent = f" ({_pct(delta.percent)})" if delta.percent is not None else ""
    return f"{_signed_money(delta.delta)} | {delta.previous.key} -> {delta.current.key}{percent}"


def _swings(summary: Summary, console: Console) -> None:
    if not (summary.largest_increases or summary.largest_decreases):
        return
    _heading(console, "Largest Period Swings")
    for delta in (*summary.largest_increases, *summary.largest_decreases):
        console.print(_swing_line(delta))


def _projection(summary: Summary, console: Console) -> None:
    if not summary.projection:
        return
    _heading(console, f"Projection (Avg of last {RECENT_WINDOW} periods)")
    for entry, amount in summary.projection.items():
        console.print(f"{entry.key:<10} | {_money(amount)}")


def _pace_alerts(summary: Summary, console: Console) -> None:
    if not summary.pace_flags:
        return
    _heading(console, f"Pacing Alerts (outside {_pct(PACE_LOWER)}-{_pct(PACE_UPPER)})")
    _alerts_table(summary.pace_flags, console)


def _year_snapshot(summary: Summary, console: Console) -> None:
    snap = summary.year_snapshot
    if snap is None:
        return
    _heading(console, f"Current Year Snapshot ({snap.year})")
    console.print(f"Periods reported: {snap.periods_reported} of {snap.periods_per_year}")
    console.print(f"Year-to-date spend: {_money(snap.year_to_date)}")
    console.print(
        f"Expected to date: {_money(snap.expected_to_date)} ({_pct(snap.pace_to_date)} pace)"
    )
    if snap.projected_year_end is not None:
        console.print(f"Projected year-end: {_money(snap.projected_year_end)}")
    if snap.variance_vs_budget is not None:
        console.print(f"Projected vs budget: {_money(snap.variance_vs_budget)}")
    console.print(f"Remaining budget: {_money(snap.remaining_budget)}")


def _runway(summary: Summary, console: Console) -> None:
    runway = summary.runway
    if runway is None:
        return
    _heading(console, "Budget Runway")
    console.print(f"Remaining periods: {runway.remaining_periods} of {runway.periods_per_year}")
    console.print(f"Remaining budget: {_money(runway.remaining_budget)}")
    if runway.required_average is not None:
        console.print(f"Required avg per remaining period: {_money(runway.required_average)}")
    else:
        console.print("Required avg per remaining period: n/a")
    if runway.recent_average is not None and runway.recent_periods > 0:
        console.print(
            f"Recent avg (last {runway.recent_periods} periods): {_money(runway.recent_average)}"
        )
    delta = runway.delta_vs_recent
    if delta is not None:
        if delta > 0:
            console.print(f"Need to increase by {_money(delta)} per period to hit budget.")
        elif delta < 0:
            console.print(f"Need to decrease by {_money(abs(delta))} per period to hit budget.")
        else:
            console.print("On track with recent pace.")


def _distribution(summary: Summary, console: Console) -> None:
    stats = summary.award_stats
    if stats.count == 0:
        return
    _heading(console, "Award Distribution")
    console.print(f"Std deviation: {_money(stats.std_dev)}")
    console.print(f"Coefficient of variation: {stats.coefficient_of_variation:.2f}")
    console.print(f"Smallest award: {_money(stats.minimum)}")
    console.print(f"Largest award: {_money(stats.maximum)}")
    console.print(f"Top award share: {_pct(summary.concentration_top1, 1)}")
    console.print(f"Top 5 awards share: {_pct(summary.concentration_top5, 1)}")

    bands = Table(title="Award Size Bands", show_edge=False)
    for col in ("Band", "Count", "Total", "Average", "Share"):
        bands.add_column(col, justify="left" if col == "Band" else "right")
    for band in summary.size_bands:
        bands.add_row(
            band.label,
            str(band.count),
            _money(band.total),
            _money(band.average),
            _pct(band.share, 1),
        )
    console.print(bands)

    if summary.top_awards:
        top = Table(title="Top Awards", show_edge=False)
        for col in ("Date", "Amount", "Category", "Cohort"):
            top.add_column(col, justify="right" if col == "Amount" else "left")
        for award in summary.top_awards:
            top.add_row(
                award.date.isoformat(),
                _money(award.amount),
                escape(award.category),
                escape(award.cohort),
            )
        console.print(top)


def _cadence(summary: Summary, console: Console) -> None:
    cadence = summary.cadence
    if cadence is None:
        return
    _heading(console, "Award Cadence")
    console.print(f"Unique award days: {cadence.unique_days}")
    console.print(f"Average gap: {cadence.average_gap_days:.1f} days")
    console.print(f"Median gap: {cadence.median_gap_days:.1f} days")
    console.print(f"Longest gap: {cadence.max_gap_days} days")
    console.print(f"Most recent gap: {cadence.recent_gap_days} days")


def _momentum(summary: Summary, console: Console) -> None:
    stats = summary.period_stats
    if stats is None:
        return
    _heading(console, "Period Momentum")
    console.print(f"Average per period: {_money(stats.average)}")
    console.print(f"Median per period: {_money(stats.median)}")
    console.print(f"Range: {_money(stats.minimum)} - {_money(stats.maximum)}")
    console.print(
        f"Recent avg ({', '.join(stats.recent_periods)}): {_money(stats.recent_average)}"
    )
    if stats.recent_momentum is not None:
        console.print(f"Recent momentum: {_pct(stats.recent_momentum)} of average")


def _breakdown(title: str, rows: Sequence[Breakdown], console: Console) -> None:
    if not rows:
        return
    _heading(console, title)
    for index, row in enumerate(rows, start=1):
        name = escape(row.name)
        console.print(f"{index:2d}. {name:<20} {_money(row.amount):>12} ({row.share:.1f}%)")


def _targets(title: str, rows: Sequence[TargetVariance], console: Console) -> None:
    if not rows:
        return
    _heading(console, title)
    for t in rows:
        console.print(
            f"{escape(t.name):<20} | Target {_pct(t.target_share, 1)} | "
            f"Actual {_money(t.actual_amount)} ({_pct(t.actual_share, 1)}) | "
            f"Variance {_signed_money(t.variance)}"
        )


def render_report(summary: Summary, config: Config, console: Console | None = None) -> None:
    """Print the full pacing report for ``summary`` to ``console`` (stdout by default)."""

    console = console or Console()
    _headline(summary, console)
    _filters(config, console)
    _period_breakdown(summary, console)
    _cumulative(summary, console)
    _seasonality(summary, console)
    _missing(summary, console)
    _streaks(summary, console)
    _swings(summary, console)
    _projection(summary, console)
    _pace_alerts(summary, console)
    _year_snapshot(summary, console)
    _runway(summary, console)
    _distribution(summary, console)
    _cadence(summary, console)
    _momentum(summary, console)
    _breakdown("Top Categories", summary.top_categories, console)
    _breakdown("Top Cohorts", summary.top_cohorts, console)
    _targets("Category Targets", summary.category_targets, console)
    _targets("Cohort Targets", summary.cohort_targets, console)


__all__ = ["LIST_LIMIT", "render_report"]
