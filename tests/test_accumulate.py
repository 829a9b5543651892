import pytest

from argue_dashboard.accumulate import OrderedAddressSet, ParticipantLedger
from argue_dashboard.models import ParticipantRecord


def test_ordered_set_keeps_first_seen_order():
    s = OrderedAddressSet()
    for a in ["0xB", "0xA", "0xB", "0xC", "0xA"]:
        s.add(a)
    assert s.to_list() == ["0xB", "0xA", "0xC"]
    assert "0xC" in s
    assert len(s) == 3


def test_ordered_set_capacity_refuses_new_entries():
    s = OrderedAddressSet(capacity=2)
    assert s.add("0xA")
    assert s.add("0xB")
    assert s.full
    assert not s.add("0xC")
    assert not s.add("0xA")
    assert s.to_list() == ["0xA", "0xB"]


def test_ordered_set_is_case_sensitive():
    s = OrderedAddressSet()
    s.add("0xabc")
    s.add("0xABC")
    assert len(s) == 2


def test_ordered_set_rejects_negative_capacity():
    with pytest.raises(ValueError):
        OrderedAddressSet(capacity=-1)


def test_ledger_keeps_accruing_after_cap():
    ledger = ParticipantLedger(capacity=1)
    assert ledger.record("0xA", 5)
    assert not ledger.record("0xB", 3)
    assert ledger.record("0xA", 2)
    assert ledger.records() == [ParticipantRecord("0xA", 2, 7)]
    assert "0xB" not in ledger


def test_ledger_zero_capacity_tracks_nobody():
    ledger = ParticipantLedger(capacity=0)
    assert not ledger.record("0xA", 1)
    assert ledger.records() == []
