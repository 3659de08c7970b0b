"""Performance aggregation over a learner's grade records in one program.

Everything here is pure: no database access, no shared state. Records are
duck-typed, so ORM ``GradeRecord`` rows and ``GradeRecordIn`` schemas both work
as long as they expose ``competency_id``, ``score``, ``weight`` and
``evaluated_at``.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from gradebook.schemas.performance import (
    CompetencyBreakdown, CompetencyStatus, PerformancePolicy,
    PerformanceSummary, Trend,
)

DEFAULT_POLICY = PerformancePolicy()


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _instant(record) -> datetime:
    # naive values are UTC, so mixed naive/aware timestamps still compare
    value = record.evaluated_at
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def weighted_average(records: Sequence) -> float:
    """sum(score * weight) / sum(weight), or 0.0 when there is nothing to weigh."""
    total_weight = sum(r.weight for r in records)
    if not records or total_weight == 0:
        return 0.0
    return sum(r.score * r.weight for r in records) / total_weight


def competency_status(average: float, policy: PerformancePolicy = DEFAULT_POLICY) -> CompetencyStatus:
    if average >= policy.approval_threshold:
        return CompetencyStatus.APPROVED
    elif average >= policy.in_progress_threshold:
        return CompetencyStatus.IN_PROGRESS
    else:
        return CompetencyStatus.FAILED


def compute_trend(records: Sequence, policy: PerformancePolicy = DEFAULT_POLICY) -> Trend:
    """Compare the mean of the earliest and the latest grades.

    Window size is ``min(policy.trend_window, n // 2)`` so the two windows never
    overlap. Ties on ``evaluated_at`` keep input order (sorted() is stable).
    """
    if len(records) < 2:
        return Trend.STABLE

    ordered = sorted(records, key=_instant)
    k = min(policy.trend_window, len(ordered) // 2)
    early = _mean([r.score for r in ordered[:k]])
    recent = _mean([r.score for r in ordered[-k:]])
    delta = recent - early

    if delta > policy.trend_tolerance:
        return Trend.IMPROVING
    elif delta < -policy.trend_tolerance:
        return Trend.DECLINING
    return Trend.STABLE


def group_by_competency(records: Iterable) -> Dict[int, List]:
    # dicts keep insertion order, so groups come out in order of first occurrence
    groups: Dict[int, List] = {}
    for record in records:
        groups.setdefault(record.competency_id, []).append(record)
    return groups


def summarize(
    learner_id: int,
    program_id: int,
    records: Iterable,
    policy: Optional[PerformancePolicy] = None,
    program_competency_ids: Optional[Iterable[int]] = None,
) -> PerformanceSummary:
    """Build a ``PerformanceSummary`` for one learner in one program.

    The caller filters ``records`` to the learner/program pair. When
    ``program_competency_ids`` is given, competencies of the program that have
    no grades yet still count towards the total (as not approved).
    """
    policy = policy or DEFAULT_POLICY
    records = list(records)
    groups = group_by_competency(records)

    breakdown = []
    for competency_id, group in groups.items():
        average = _mean([r.score for r in group])
        breakdown.append(CompetencyBreakdown(
            competency_id=competency_id,
            record_count=len(group),
            average=average,
            status=competency_status(average, policy),
        ))

    approved = sum(1 for c in breakdown if c.status == CompetencyStatus.APPROVED)
    competency_ids = set(groups)
    if program_competency_ids is not None:
        competency_ids |= set(program_competency_ids)
    total = len(competency_ids)

    # 0 competencies -> 0%, not a division error
    completion = (approved / total) * 100 if total else 0.0

    return PerformanceSummary(
        learner_id=learner_id,
        program_id=program_id,
        overall_average=weighted_average(records),
        approved_competencies=approved,
        total_competencies=total,
        completion_percentage=completion,
        competencies=breakdown,
        trend=compute_trend(records, policy),
    )


def is_certificate_eligible(summary: PerformanceSummary, policy: Optional[PerformancePolicy] = None) -> bool:
    """All competencies approved and the overall average meets the bar."""
    policy = policy or DEFAULT_POLICY
    return (
        summary.completion_percentage == 100
        and summary.overall_average >= policy.certificate_min_average
    )
