"""
Tests for the pure performance aggregator and the certificate predicate.

Run with: pytest tests/test_performance.py -v
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from gradebook.schemas.grade import GradeRecordIn
from gradebook.schemas.performance import (
    CompetencyStatus, PerformancePolicy, PerformanceSummary, Trend,
)
from gradebook.services.performance import (
    summarize, competency_status, compute_trend, weighted_average,
    group_by_competency, is_certificate_eligible,
)

T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def rec(competency_id, score, weight=1.0, max_score=100.0, day=0):
    return GradeRecordIn(
        competency_id=competency_id,
        score=score,
        max_score=max_score,
        weight=weight,
        evaluated_at=T0 + timedelta(days=day),
    )


class TestScenarios:
    """Worked examples for the aggregator."""

    def test_two_records_one_competency(self):
        summary = summarize(1, 10, [rec(1, 90), rec(1, 70, day=1)])

        assert len(summary.competencies) == 1
        c1 = summary.competencies[0]
        assert c1.average == pytest.approx(80)
        assert c1.status == CompetencyStatus.APPROVED
        assert c1.record_count == 2

    def test_single_in_progress_record(self):
        summary = summarize(1, 10, [rec(1, 55, weight=2)])

        assert summary.overall_average == pytest.approx(55)
        assert summary.competencies[0].status == CompetencyStatus.IN_PROGRESS
        assert summary.approved_competencies == 0
        assert summary.total_competencies == 1
        assert summary.completion_percentage == 0

    def test_zero_records(self):
        summary = summarize(1, 10, [])

        assert summary.overall_average == 0
        assert summary.total_competencies == 0
        assert summary.approved_competencies == 0
        assert summary.completion_percentage == 0
        assert summary.competencies == []
        assert summary.trend == Trend.STABLE

    def test_learner_and_program_are_carried(self):
        summary = summarize(7, 42, [rec(1, 80)])
        assert summary.learner_id == 7
        assert summary.program_id == 42


class TestWeightedAverage:
    """Overall average is weighted across all records, ignoring competency."""

    def test_formula(self):
        records = [rec(1, 90, weight=3), rec(2, 40, weight=1), rec(2, 60, weight=0.5)]
        expected = (90 * 3 + 40 * 1 + 60 * 0.5) / (3 + 1 + 0.5)

        assert weighted_average(records) == pytest.approx(expected)
        assert summarize(1, 1, records).overall_average == pytest.approx(expected)

    def test_competency_average_is_unweighted(self):
        summary = summarize(1, 1, [rec(1, 100, weight=9), rec(1, 50, weight=1)])

        assert summary.competencies[0].average == pytest.approx(75)
        assert summary.overall_average == pytest.approx(95)

    def test_empty_is_zero(self):
        assert weighted_average([]) == 0.0


class TestCompetencyStatus:
    """Threshold boundaries."""

    def test_boundaries(self):
        assert competency_status(70) == CompetencyStatus.APPROVED
        assert competency_status(69.99) == CompetencyStatus.IN_PROGRESS
        assert competency_status(50) == CompetencyStatus.IN_PROGRESS
        assert competency_status(49.99) == CompetencyStatus.FAILED
        assert competency_status(0) == CompetencyStatus.FAILED
        assert competency_status(100) == CompetencyStatus.APPROVED

    def test_custom_policy(self):
        policy = PerformancePolicy(approval_threshold=80, in_progress_threshold=60)

        assert competency_status(75, policy) == CompetencyStatus.IN_PROGRESS
        assert competency_status(55, policy) == CompetencyStatus.FAILED
        assert summarize(1, 1, [rec(1, 75)], policy).completion_percentage == 0


class TestGrouping:
    """Groups follow first-occurrence order and are never empty."""

    def test_insertion_order(self):
        records = [rec(3, 80), rec(1, 60), rec(3, 90), rec(2, 40)]

        assert list(group_by_competency(records)) == [3, 1, 2]
        summary = summarize(1, 1, records)
        assert [c.competency_id for c in summary.competencies] == [3, 1, 2]
        assert all(c.record_count > 0 for c in summary.competencies)

    def test_completion_percentage(self):
        records = [rec(1, 80), rec(2, 75), rec(3, 40)]
        summary = summarize(1, 1, records)

        assert summary.approved_competencies == 2
        assert summary.total_competencies == 3
        assert summary.completion_percentage == pytest.approx(200 / 3)
        assert 0 <= summary.completion_percentage <= 100

    def test_program_competencies_without_grades_count(self):
        summary = summarize(1, 1, [rec(1, 90)], program_competency_ids=[1, 2, 3, 4])

        assert summary.total_competencies == 4
        assert summary.approved_competencies == 1
        assert summary.completion_percentage == pytest.approx(25)
        # breakdown only lists graded competencies
        assert [c.competency_id for c in summary.competencies] == [1]

    def test_program_competencies_union_with_graded(self):
        summary = summarize(1, 1, [rec(1, 90), rec(9, 90)], program_competency_ids=[1, 2])
        assert summary.total_competencies == 3


class TestTrend:
    """Early window versus recent window."""

    def test_improving(self):
        records = [rec(1, 50, day=0), rec(1, 55, day=1), rec(1, 80, day=2), rec(1, 90, day=3)]
        assert compute_trend(records) == Trend.IMPROVING

    def test_declining(self):
        records = [rec(1, 95, day=0), rec(1, 90, day=1), rec(1, 60, day=2), rec(1, 50, day=3)]
        assert compute_trend(records) == Trend.DECLINING

    def test_stable_within_tolerance(self):
        records = [rec(1, 80, day=0), rec(1, 81, day=1)]
        assert compute_trend(records) == Trend.STABLE

    def test_single_record_is_stable(self):
        assert compute_trend([rec(1, 10)]) == Trend.STABLE

    def test_orders_by_evaluation_time_not_input(self):
        records = [rec(1, 90, day=5), rec(1, 40, day=0)]
        assert compute_trend(records) == Trend.IMPROVING

    def test_mixed_naive_and_aware_timestamps(self):
        records = [
            GradeRecordIn(competency_id=1, score=60, evaluated_at=datetime(2026, 1, 1)),
            GradeRecordIn(competency_id=1, score=90, evaluated_at=datetime(2026, 1, 2, tzinfo=timezone.utc)),
        ]
        summary = summarize(1, 1, records)
        assert summary.trend == Trend.IMPROVING

    def test_mixed_timestamps_on_plain_records(self):
        # ORM rows are not normalised by the schema
        later_naive = SimpleNamespace(competency_id=1, score=90, weight=1, evaluated_at=datetime(2026, 1, 1, 6, 0))
        earlier_aware = SimpleNamespace(
            competency_id=1, score=40, weight=1,
            evaluated_at=datetime(2026, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=5))),
        )
        assert compute_trend([later_naive, earlier_aware]) == Trend.IMPROVING

    def test_window_is_capped(self):
        # window 3 on 8 records: early = days 0-2, recent = days 5-7
        scores = [60, 60, 60, 10, 100, 70, 70, 70]
        records = [rec(1, s, day=i) for i, s in enumerate(scores)]

        assert compute_trend(records) == Trend.IMPROVING
        assert compute_trend(records, PerformancePolicy(trend_window=1, trend_tolerance=20)) == Trend.STABLE


class TestPurity:
    """Same input, same output."""

    def test_idempotent(self):
        records = [rec(1, 90, day=2), rec(2, 45, weight=2, day=0), rec(1, 71, day=1)]

        first = summarize(3, 4, records)
        second = summarize(3, 4, records)
        assert first == second

    def test_accepts_generator(self):
        summary = summarize(1, 1, (r for r in [rec(1, 90), rec(1, 80)]))
        assert summary.overall_average == pytest.approx(85)


class TestCertificateEligibility:
    """Certificate gate over a summary."""

    def test_eligible(self):
        summary = summarize(1, 1, [rec(1, 90), rec(2, 70)])
        assert is_certificate_eligible(summary)

    def test_incomplete_is_not_eligible(self):
        summary = summarize(1, 1, [rec(1, 95), rec(2, 60)])
        assert summary.overall_average >= 70
        assert not is_certificate_eligible(summary)

    def test_low_average_is_not_eligible(self):
        # every competency approved but weights drag the overall below the bar
        summary = PerformanceSummary(
            learner_id=1, program_id=1, overall_average=69.5,
            approved_competencies=2, total_competencies=2, completion_percentage=100,
            competencies=[], trend=Trend.STABLE,
        )
        assert not is_certificate_eligible(summary)

    def test_empty_is_not_eligible(self):
        assert not is_certificate_eligible(summarize(1, 1, []))

    def test_custom_minimum(self):
        summary = summarize(1, 1, [rec(1, 75)])
        assert not is_certificate_eligible(summary, PerformancePolicy(certificate_min_average=80))
