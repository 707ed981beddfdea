from datetime import date, datetime, timedelta, timezone

from fiscaliza import history
from fiscaliza.schemas import InspectionAction, InspectionStatus, InspectionType

T0 = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


def test_merge_sorts_newest_first_and_keeps_tie_order():
    old = [history.entry("a", "old-2", T0 + timedelta(minutes=1)), history.entry("a", "old-1", T0)]
    new = [
        history.entry("b", "new-1", T0 + timedelta(minutes=5)),
        history.entry("b", "new-2", T0 + timedelta(minutes=5)),
    ]
    merged = history.merge(old, new)
    assert [e.change for e in merged] == ["new-1", "new-2", "old-2", "old-1"]


def test_merge_places_backdated_entries_by_timestamp():
    old = [history.entry("a", "recent", T0 + timedelta(days=1))]
    new = [history.entry("a", "backdated", T0)]
    assert [e.change for e in history.merge(old, new)] == ["recent", "backdated"]


def test_diff_compares_actions_as_sets(make_record):
    record = make_record(actions=[InspectionAction.FINE, InspectionAction.EMBARGO])
    same = history.diff(record, {"actions": [InspectionAction.EMBARGO, InspectionAction.FINE]}, "u", T0)
    assert same == []
    changed = history.diff(record, {"actions": [InspectionAction.FINE]}, "u", T0)
    assert [e.change for e in changed] == [history.actions_updated()]


def test_diff_compares_infractions_by_full_equality(make_record):
    record = make_record(verified_infractions={InspectionType.INFILTRATION: True})
    assert history.diff(record, {"verified_infractions": {InspectionType.INFILTRATION: True}}, "u", T0) == []
    changed = history.diff(record, {"verified_infractions": {InspectionType.INFILTRATION: False}}, "u", T0)
    assert len(changed) == 1


def test_diff_ignores_fields_not_sent(make_record):
    record = make_record(status=InspectionStatus.CLOSED, report="texto")
    assert history.diff(record, {"contact_phone": "1"}, "u", T0) == []


def test_blank_report_equals_missing_report(make_record):
    assert history.diff(make_record(report=None), {"report": ""}, "u", T0) == []


def test_templates():
    assert history.created(None) == "Chamado criado."
    assert history.inspector_changed("Ana", "Bia") == "Fiscal responsável alterado de Ana para Bia."
    assert history.follow_up_scheduled(date(2024, 12, 1)) == "Agendamento de retorno criado para 01/12/2024."
