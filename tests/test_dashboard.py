from datetime import timedelta

from fiscaliza.presentation import PRESENTATION, present, presentation_table
from fiscaliza.schemas import InspectionAction, InspectionStatus
from fiscaliza.services.dashboard import dashboard_summary


def test_every_status_and_action_has_a_presentation():
    for key in [*InspectionStatus, *InspectionAction]:
        assert key in PRESENTATION
    assert present(InspectionStatus.CLOSED).color == "green"


def test_presentation_table_is_keyed_by_value():
    table = presentation_table()
    assert set(table["status"]) == {s.value for s in InspectionStatus}
    assert table["action"]["Autuação"]["icon"] == "banknotes"


def test_dashboard_counts_and_lists(make_record):
    base = make_record().created_at
    statuses = [
        InspectionStatus.OPEN, InspectionStatus.CLOSED, InspectionStatus.UNDER_REVIEW,
        InspectionStatus.PENDING_FOLLOW_UP, InspectionStatus.IN_PROGRESS, InspectionStatus.OPEN,
        InspectionStatus.OPEN,
    ]
    records = [
        make_record(id=f"r{i}", protocol=f"2024-{i:03d}", status=s, created_at=base + timedelta(hours=i))
        for i, s in enumerate(statuses)
    ]
    out = dashboard_summary(records)
    assert out.total == 7
    assert out.counts[InspectionStatus.OPEN] == 3
    assert out.counts[InspectionStatus.CLOSED] == 1
    assert [r.id for r in out.recent] == ["r6", "r5", "r4", "r3", "r2"]
    assert [r.id for r in out.high_priority] == ["r4", "r3", "r2"]


def test_high_priority_keeps_newest_first_across_statuses(make_record):
    base = make_record().created_at
    records = [
        make_record(id=f"r{i}", protocol=f"2024-{i:03d}", status=InspectionStatus.PENDING_FOLLOW_UP,
                    created_at=base + timedelta(hours=i))
        for i in range(5)
    ]
    records.append(make_record(id="r5", protocol="2024-005", status=InspectionStatus.UNDER_REVIEW,
                               created_at=base + timedelta(hours=5)))
    out = dashboard_summary(records)
    assert [r.id for r in out.high_priority] == ["r5", "r4", "r3", "r2", "r1"]


def test_dashboard_empty():
    out = dashboard_summary([])
    assert out.total == 0 and out.recent == [] and out.high_priority == []
    assert all(v == 0 for v in out.counts.values())
