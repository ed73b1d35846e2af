"""Tests for the maintenance due calculator and catalog."""

import math

import pytest

from printtrack.maintenance import (
    DueStatus,
    MaintenanceDue,
    MaintenanceDueCalculator,
    MaintenanceInterval,
    MaintenanceLogEntry,
    MaintenanceSnapshot,
    PrintJob,
    Remaining,
    RemainingPolicy,
    compute_remaining,
    compute_status,
    compute_usage_since,
    describe_remaining,
    evaluate_interval,
    evaluate_maintenance,
    evaluate_snapshot,
    get_type_info,
    is_known_type,
    maintenance_type_names,
    printer_status,
    rank_by_urgency,
)
from printtrack.maintenance.calculator import (
    PRINTER_MAINTENANCE_DUE,
    PRINTER_OK,
    find_last_service,
    urgency_key,
)


def job(printer_id="P1", start=None, end=None, job_id=None, **kwargs):
    return PrintJob(printer_id=printer_id, start_time=start, end_time=end, id=job_id, **kwargs)


def hours_job(day, start_hour, hours, printer_id="P1"):
    """A job on 2024-05-<day> starting at start_hour and lasting whole hours."""
    start = f"2024-05-{day:02d}T{start_hour:02d}:00:00Z"
    end_hour = start_hour + hours
    end = f"2024-05-{day + end_hour // 24:02d}T{end_hour % 24:02d}:00:00Z"
    return job(printer_id, start, end)


def log(date, printer_id="P1", type="Nozzle Clean", log_id=None):
    return MaintenanceLogEntry(printer_id=printer_id, type=type, date=date, id=log_id)


NOZZLE_5 = MaintenanceInterval(printer_id="P1", type="Nozzle Clean", interval_prints=5)


class TestMaintenanceInterval:
    """Tests for MaintenanceInterval thresholds."""

    def test_unset_thresholds(self):
        interval = MaintenanceInterval(printer_id="P1", type="Other")
        assert interval.prints_threshold is None
        assert interval.hours_threshold is None
        assert not interval.is_actionable

    def test_zero_threshold_is_unset(self):
        interval = MaintenanceInterval(printer_id="P1", type="Other", interval_prints=0, interval_hours=0)
        assert interval.prints_threshold is None
        assert interval.hours_threshold is None

    def test_numeric_strings_are_coerced(self):
        interval = MaintenanceInterval(printer_id="P1", type="Nozzle Clean", interval_prints="5", interval_hours="2.5")
        assert interval.prints_threshold == 5
        assert interval.hours_threshold == 2.5

        due = evaluate_interval(interval, [], [job()])
        assert due.status == DueStatus.OK
        assert due.prints_remaining == 4

    def test_non_numeric_threshold_is_unset(self):
        interval = MaintenanceInterval(printer_id="P1", type="Other", interval_prints="often", interval_hours=[])
        assert interval.prints_threshold is None
        assert interval.hours_threshold is None

        due = evaluate_interval(interval, [], [job(), job()])
        assert due.status == DueStatus.OK
        assert due.prints_remaining is None
        assert due.hours_remaining is None

    def test_from_dict_keeps_none(self):
        interval = MaintenanceInterval.from_dict({
            "printer_id": "P1",
            "type": "Bed Level",
            "interval_prints": "10",
            "interval_hours": None,
        })
        assert interval.interval_prints == 10
        assert interval.interval_hours is None

    def test_to_dict(self):
        data = NOZZLE_5.to_dict()
        assert data["printer_id"] == "P1"
        assert data["interval_prints"] == 5
        assert data["interval_hours"] is None


class TestPrintJob:
    """Tests for PrintJob durations."""

    def test_duration(self):
        assert job(start="2024-05-01T10:00:00Z", end="2024-05-01T12:30:00Z").duration_hours == 2.5

    def test_missing_end(self):
        assert job(start="2024-05-01T10:00:00Z").duration_hours == 0.0

    def test_invalid_timestamp(self):
        assert job(start="yesterday", end="2024-05-01T12:00:00Z").duration_hours == 0.0

    def test_end_before_start(self):
        assert job(start="2024-05-01T12:00:00Z", end="2024-05-01T10:00:00Z").duration_hours == 0.0

    def test_end_equals_start(self):
        assert job(start="2024-05-01T12:00:00Z", end="2024-05-01T12:00:00Z").duration_hours == 0.0

    def test_offsets_normalized(self):
        j = job(start="2024-05-01T12:00:00+02:00", end="2024-05-01T11:00:00Z")
        assert j.duration_hours == 1.0


class TestUsageSince:
    """Tests for compute_usage_since."""

    def test_no_logs_counts_all_printer_jobs(self):
        jobs = [hours_job(1, 10, 2), hours_job(2, 10, 3), hours_job(3, 10, 1, printer_id="P2")]
        usage = compute_usage_since(NOZZLE_5, [], jobs)
        assert usage.jobs_since == 2
        assert usage.hours_since == 5.0
        assert usage.last_service is None

    def test_jobs_after_baseline_only(self):
        jobs = [hours_job(1, 10, 1), hours_job(3, 10, 1), hours_job(4, 10, 1)]
        usage = compute_usage_since(NOZZLE_5, [log("2024-05-02T00:00:00Z")], jobs)
        assert usage.jobs_since == 2
        assert usage.hours_since == 2.0

    def test_job_at_baseline_not_counted(self):
        jobs = [job(start="2024-05-02T00:00:00Z", end="2024-05-02T01:00:00Z")]
        usage = compute_usage_since(NOZZLE_5, [log("2024-05-02T00:00:00Z")], jobs)
        assert usage.jobs_since == 0

    def test_most_recent_log_is_baseline(self):
        logs = [log("2024-05-01T00:00:00Z"), log("2024-05-03T00:00:00Z"), log("2024-05-02T00:00:00Z")]
        usage = compute_usage_since(NOZZLE_5, logs, [hours_job(2, 10, 1), hours_job(4, 10, 1)])
        assert usage.last_service.date == "2024-05-03T00:00:00Z"
        assert usage.jobs_since == 1

    def test_other_type_and_printer_logs_ignored(self):
        logs = [
            log("2024-05-10T00:00:00Z", type="Bed Level"),
            log("2024-05-10T00:00:00Z", printer_id="P2"),
        ]
        usage = compute_usage_since(NOZZLE_5, logs, [hours_job(2, 10, 1)])
        assert usage.last_service is None
        assert usage.jobs_since == 1

    def test_unparsable_log_date_ignored(self):
        logs = [log("not a date"), log("2024-05-02T00:00:00Z")]
        usage = compute_usage_since(NOZZLE_5, logs, [hours_job(1, 10, 1), hours_job(3, 10, 1)])
        assert usage.last_service.date == "2024-05-02T00:00:00Z"
        assert usage.jobs_since == 1

    def test_tie_broken_by_highest_id(self):
        logs = [log("2024-05-02T00:00:00Z", log_id="a"), log("2024-05-02T00:00:00Z", log_id="b")]
        assert find_last_service(NOZZLE_5, logs).id == "b"
        assert find_last_service(NOZZLE_5, list(reversed(logs))).id == "b"

    def test_missing_timestamps_count_without_hours(self):
        jobs = [job(start="2024-05-01T10:00:00Z"), job(end="2024-05-01T10:00:00Z"), job()]
        usage = compute_usage_since(NOZZLE_5, [], jobs)
        assert usage.jobs_since == 3
        assert usage.hours_since == 0.0

    def test_missing_end_after_baseline_counts(self):
        usage = compute_usage_since(
            NOZZLE_5,
            [log("2024-05-01T00:00:00Z")],
            [job(start="2024-05-02T10:00:00Z")],
        )
        assert usage.jobs_since == 1
        assert usage.hours_since == 0.0

    def test_missing_start_with_baseline_not_counted(self):
        usage = compute_usage_since(NOZZLE_5, [log("2024-05-01T00:00:00Z")], [job(end="2024-05-02T10:00:00Z")])
        assert usage.jobs_since == 0

    def test_reversed_job_contributes_zero_hours(self):
        jobs = [job(start="2024-05-02T12:00:00Z", end="2024-05-02T10:00:00Z"), hours_job(3, 10, 2)]
        usage = compute_usage_since(NOZZLE_5, [], jobs)
        assert usage.jobs_since == 2
        assert usage.hours_since == 2.0

    def test_idempotent(self):
        logs = [log("2024-05-02T00:00:00Z")]
        jobs = [hours_job(1, 10, 2), hours_job(3, 10, 2)]
        first = compute_usage_since(NOZZLE_5, logs, jobs)
        second = compute_usage_since(NOZZLE_5, logs, jobs)
        assert first == second
        assert compute_status(NOZZLE_5, first.jobs_since, first.hours_since) == \
            compute_status(NOZZLE_5, second.jobs_since, second.hours_since)

    def test_monotonic_when_adding_jobs(self):
        logs = [log("2024-05-02T00:00:00Z")]
        jobs = [hours_job(3, 10, 2)]
        before = compute_usage_since(NOZZLE_5, logs, jobs)
        for extra in (hours_job(4, 10, 1), job(start="2024-05-05T10:00:00Z"),
                      job(start="2024-05-06T10:00:00Z", end="2024-05-06T09:00:00Z")):
            jobs = jobs + [extra]
            after = compute_usage_since(NOZZLE_5, logs, jobs)
            assert after.jobs_since > before.jobs_since
            assert after.hours_since >= before.hours_since
            before = after

    def test_inputs_not_mutated(self):
        logs = [log("2024-05-02T00:00:00Z")]
        jobs = [hours_job(3, 10, 2)]
        compute_usage_since(NOZZLE_5, logs, jobs)
        assert logs == [log("2024-05-02T00:00:00Z")]
        assert jobs == [hours_job(3, 10, 2)]


class TestComputeStatus:
    """Tests for compute_status."""

    @pytest.mark.parametrize("jobs_since,hours_since", [(0, 0.0), (100, 0.0), (0, 1000.0), (10**6, 10**6)])
    def test_no_thresholds_always_ok(self, jobs_since, hours_since):
        interval = MaintenanceInterval(printer_id="P1", type="Other")
        assert compute_status(interval, jobs_since, hours_since) == DueStatus.OK

    def test_zero_thresholds_not_overdue(self):
        interval = MaintenanceInterval(printer_id="P1", type="Other", interval_prints=0, interval_hours=0.0)
        assert compute_status(interval, 0, 0.0) == DueStatus.OK

    def test_prints_boundaries(self):
        assert compute_status(NOZZLE_5, 5, 0.0) == DueStatus.OVERDUE
        assert compute_status(NOZZLE_5, 6, 0.0) == DueStatus.OVERDUE
        assert compute_status(NOZZLE_5, 4, 0.0) == DueStatus.DUE_SOON
        assert compute_status(NOZZLE_5, 3, 0.0) == DueStatus.OK

    def test_hours_boundaries(self):
        interval = MaintenanceInterval(printer_id="P1", type="Lubrication", interval_hours=10)
        assert compute_status(interval, 0, 10.0) == DueStatus.OVERDUE
        assert compute_status(interval, 0, 9.0) == DueStatus.DUE_SOON
        assert compute_status(interval, 0, 8.99) == DueStatus.OK

    def test_either_axis_overdue(self):
        interval = MaintenanceInterval(printer_id="P1", type="Nozzle Clean", interval_prints=5, interval_hours=10)
        assert compute_status(interval, 0, 10.0) == DueStatus.OVERDUE
        assert compute_status(interval, 5, 0.0) == DueStatus.OVERDUE
        assert compute_status(interval, 4, 0.0) == DueStatus.DUE_SOON

    def test_unset_axis_ignored(self):
        # Huge hours must not matter when only prints are configured
        assert compute_status(NOZZLE_5, 0, 10**6) == DueStatus.OK


class TestComputeRemaining:
    """Tests for compute_remaining."""

    def test_true_remaining(self):
        interval = MaintenanceInterval(printer_id="P1", type="Nozzle Clean", interval_prints=5, interval_hours=10)
        remaining = compute_remaining(interval, 2, 3.3)
        assert remaining.prints_remaining == 3
        assert remaining.hours_remaining == 6.7

    def test_negative_when_overdue(self):
        interval = MaintenanceInterval(printer_id="P1", type="Lubrication", interval_hours=10)
        assert compute_remaining(interval, 0, 11.0).hours_remaining == -1.0
        assert compute_remaining(NOZZLE_5, 7, 0.0).prints_remaining == -2

    def test_unset_axis_is_none(self):
        remaining = compute_remaining(NOZZLE_5, 2, 3.0)
        assert remaining.hours_remaining is None
        assert compute_remaining(MaintenanceInterval(printer_id="P1", type="Other"), 2, 3.0) == Remaining()

    def test_true_remaining_ignores_service_flag(self):
        assert compute_remaining(NOZZLE_5, 2, 0.0, serviced=True).prints_remaining == 3

    def test_reset_on_log_policy(self):
        interval = MaintenanceInterval(printer_id="P1", type="Nozzle Clean", interval_prints=5, interval_hours=10)
        remaining = compute_remaining(interval, 2, 3.0, policy=RemainingPolicy.RESET_ON_LOG, serviced=True)
        assert remaining.prints_remaining == 5
        assert remaining.hours_remaining == 10.0

    def test_reset_on_log_without_service(self):
        remaining = compute_remaining(NOZZLE_5, 2, 0.0, policy=RemainingPolicy.RESET_ON_LOG, serviced=False)
        assert remaining.prints_remaining == 3


class TestScenarios:
    """End-to-end evaluation of one interval."""

    def test_five_jobs_no_logs_overdue(self):
        jobs = [hours_job(d, 10, 1) for d in range(1, 6)]
        due = evaluate_interval(NOZZLE_5, [], jobs)
        assert due.status == DueStatus.OVERDUE
        assert due.prints_remaining == 0
        assert due.hours_remaining is None

    def test_four_jobs_no_logs_due_soon(self):
        jobs = [hours_job(d, 10, 1) for d in range(1, 5)]
        due = evaluate_interval(NOZZLE_5, [], jobs)
        assert due.status == DueStatus.DUE_SOON
        assert due.prints_remaining == 1

    def test_two_jobs_after_service_ok(self):
        jobs = [hours_job(d, 10, 1) for d in range(1, 5)] + [hours_job(11, 10, 1), hours_job(12, 10, 1)]
        due = evaluate_interval(NOZZLE_5, [log("2024-05-10T00:00:00Z")], jobs)
        assert due.jobs_since == 2
        assert due.status == DueStatus.OK
        assert due.prints_remaining == 3
        assert due.last_service_date == "2024-05-10T00:00:00Z"

    def test_hours_overdue(self):
        interval = MaintenanceInterval(printer_id="P1", type="Lubrication", interval_hours=10)
        logs = [log("2024-05-01T00:00:00Z", type="Lubrication")]
        due = evaluate_interval(interval, logs, [hours_job(2, 0, 6), hours_job(3, 0, 5)])
        assert due.hours_since == 11.0
        assert due.status == DueStatus.OVERDUE
        assert due.hours_remaining == -1.0
        assert due.messages == ["Overdue by 1.0 hours"]

    def test_reset_on_log_keeps_status(self):
        jobs = [hours_job(d, 10, 1) for d in range(11, 17)]
        due = evaluate_interval(NOZZLE_5, [log("2024-05-10T00:00:00Z")], jobs, policy=RemainingPolicy.RESET_ON_LOG)
        assert due.status == DueStatus.OVERDUE
        assert due.prints_remaining == 5


class TestDescribeRemaining:
    """Tests for remaining messages."""

    def test_left(self):
        assert describe_remaining(Remaining(prints_remaining=3, hours_remaining=1.5)) == "3 prints left, 1.5 hours left"

    def test_due_now(self):
        assert describe_remaining(Remaining(prints_remaining=0, hours_remaining=0.0)) == "Due now (prints), Due now (hours)"

    def test_overdue(self):
        assert describe_remaining(Remaining(prints_remaining=-2)) == "Overdue by 2 prints"

    def test_nothing_configured(self):
        assert describe_remaining(Remaining()) == ""


def due_entry(prints=None, hours=None, type="Other"):
    return MaintenanceDue(
        interval=MaintenanceInterval(printer_id="P1", type=type),
        status=DueStatus.OK,
        jobs_since=0,
        hours_since=0.0,
        prints_remaining=prints,
        hours_remaining=hours,
    )


class TestRankByUrgency:
    """Tests for rank_by_urgency."""

    def test_urgency_key(self):
        assert urgency_key(due_entry(prints=3)) == 3
        assert urgency_key(due_entry(hours=50.0)) == 2
        assert urgency_key(due_entry(prints=5, hours=30.0)) == 1
        assert urgency_key(due_entry()) == math.inf

    def test_sorted_ascending(self):
        a = due_entry(prints=4, type="A")
        b = due_entry(prints=-1, type="B")
        c = due_entry(hours=72.0, type="C")
        ranked = rank_by_urgency([a, b, c])
        assert [d.interval.type for d in ranked] == ["B", "C", "A"]

    def test_unconfigured_last(self):
        ranked = rank_by_urgency([due_entry(type="None"), due_entry(prints=100, type="Far")])
        assert [d.interval.type for d in ranked] == ["Far", "None"]

    def test_stable_for_equal_keys(self):
        first = due_entry(prints=2, type="First")
        second = due_entry(prints=2, type="Second")
        assert [d.interval.type for d in rank_by_urgency([first, second])] == ["First", "Second"]


class TestSnapshotEvaluation:
    """Tests for snapshot-level evaluation."""

    @pytest.fixture
    def snapshot(self):
        intervals = [
            NOZZLE_5,
            MaintenanceInterval(printer_id="P1", type="Lubrication", interval_hours=100),
            MaintenanceInterval(printer_id="P2", type="Bed Level", interval_prints=2),
        ]
        jobs = [hours_job(d, 10, 1) for d in range(1, 6)] + [hours_job(1, 10, 1, printer_id="P2")]
        return MaintenanceSnapshot.of(intervals, [], jobs)

    def test_evaluate_snapshot_ranked(self, snapshot):
        results = evaluate_snapshot(snapshot)
        assert [d.interval.type for d in results] == ["Nozzle Clean", "Bed Level", "Lubrication"]

    def test_evaluate_snapshot_for_printer(self, snapshot):
        results = evaluate_snapshot(snapshot, printer_id="P2")
        assert len(results) == 1
        assert results[0].status == DueStatus.DUE_SOON

    def test_printer_status(self, snapshot):
        assert printer_status(snapshot, "P1") == PRINTER_MAINTENANCE_DUE
        assert printer_status(snapshot, "P2") == PRINTER_OK
        assert printer_status(snapshot, "P3") == PRINTER_OK

    def test_for_printer(self, snapshot):
        p2 = snapshot.for_printer("P2")
        assert len(p2.intervals) == 1
        assert len(p2.jobs) == 1

    def test_calculator_due_items(self, snapshot):
        calculator = MaintenanceDueCalculator()
        items = calculator.due_items(snapshot)
        assert [d.status for d in items] == [DueStatus.OVERDUE, DueStatus.DUE_SOON]

    def test_calculator_policy_from_string(self):
        calculator = MaintenanceDueCalculator("reset_on_log")
        assert calculator.policy == RemainingPolicy.RESET_ON_LOG

    def test_evaluate_maintenance(self, snapshot):
        results = evaluate_maintenance(snapshot.intervals, snapshot.logs, snapshot.jobs)
        assert len(results) == 3

    def test_due_to_dict(self, snapshot):
        data = evaluate_snapshot(snapshot)[0].to_dict()
        assert data["status"] == "Overdue"
        assert data["type"] == "Nozzle Clean"
        assert data["prints_remaining"] == 0
        assert data["messages"] == ["Due now (prints)"]


class TestCatalog:
    """Tests for the maintenance type catalog."""

    def test_names(self):
        assert maintenance_type_names() == [
            "Nozzle Clean", "Bed Level", "Lubrication",
            "Firmware Update", "General Inspection", "Other",
        ]

    def test_known_type(self):
        assert is_known_type("Bed Level")
        assert not is_known_type("bed level")
        assert not is_known_type("Belt Tension")

    def test_suggestions(self):
        nozzle = get_type_info("Nozzle Clean")
        assert nozzle.suggested_prints == 20
        assert nozzle.suggested_hours == 50
        assert nozzle.has_suggestion
        assert not get_type_info("Other").has_suggestion
        assert get_type_info("Unknown") is None
