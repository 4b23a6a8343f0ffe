"""Aggregate views over a generated capacity log."""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterable, Optional

from .schemas import CapacityObservation, LogSummary


def summarize(
    observations: Iterable[CapacityObservation],
    tz: Optional[tzinfo] = None,
) -> LogSummary:
    """Count observations by state and tag, and measure the covered span.

    ``days`` counts distinct calendar dates in ``tz`` (UTC by default).
    """

    summary = LogSummary()
    dates = set()

    for observation in observations:
        summary.total += 1
        summary.by_state[observation.state] += 1

        category = observation.category
        if category is None:
            summary.untagged += 1
        else:
            summary.by_tag[category] += 1

        if observation.note is not None:
            summary.with_notes += 1

        dates.add(observation.local_date(tz))

        if summary.newest_timestamp is None or observation.timestamp > summary.newest_timestamp:
            summary.newest_timestamp = observation.timestamp
        if summary.oldest_timestamp is None or observation.timestamp < summary.oldest_timestamp:
            summary.oldest_timestamp = observation.timestamp

    summary.days = len(dates)
    return summary


def format_summary(summary: LogSummary) -> str:
    """Render a summary as a short multi-line report."""

    if summary.total == 0:
        return "No observations."

    state_parts = ", ".join(
        f"{state}={count} ({summary.share(state):.0%})" for state, count in summary.by_state.items()
    )
    tag_parts = ", ".join(f"{tag}={count}" for tag, count in summary.by_tag.items())
    lines = [
        f"Observations: {summary.total} across {summary.days} days",
        f"  States: {state_parts}",
        f"  Tags: {tag_parts}, untagged={summary.untagged}",
        f"  With notes: {summary.with_notes}",
    ]
    return "\n".join(lines)
