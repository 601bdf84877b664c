"""
Tests for the ledger accounting engine.

Balances are re-derived from entries; every operation returns new data
and leaves its input untouched.
"""

import re
from decimal import Decimal

import pytest

from foco_finance.accounting import ledger_engine
from foco_finance.models import EntryStatus, Party


class TestComputeBalance:
    """Tests for the all-time outstanding balance."""

    def test_empty_ledger_is_settled(self):
        """Test that no entries means a zero balance."""
        assert ledger_engine.compute_balance([]) == 0
        assert ledger_engine.balance_label(Decimal("0")) == "Em dia"

    def test_sign_follows_who_paid(self, entry):
        """Test that my payments count for me and the friend's against me."""
        entries = [
            entry("100", Party.ME),
            entry("30", Party.FRIEND),
        ]
        balance = ledger_engine.compute_balance(entries)
        assert balance == Decimal("70")
        assert ledger_engine.balance_label(balance) == "Ele te deve"

    def test_negative_when_i_owe(self, entry):
        """Test that the friend paying more makes the balance negative."""
        balance = ledger_engine.compute_balance([entry("20", Party.ME), entry("50", Party.FRIEND)])
        assert balance == Decimal("-30")
        assert ledger_engine.balance_label(balance) == "Você deve"

    def test_paid_entries_do_not_count(self, entry):
        """Test that paid entries contribute zero."""
        entries = [
            entry("100", Party.ME, status=EntryStatus.PAID),
            entry("40", Party.FRIEND),
        ]
        assert ledger_engine.compute_balance(entries) == Decimal("-40")

    def test_balance_spans_all_months(self, entry):
        """Test that the balance is not scoped to a month."""
        entries = [
            entry("10", Party.ME, date="2024-12-31"),
            entry("15", Party.ME, date="2025-03-01"),
        ]
        assert ledger_engine.compute_balance(entries) == Decimal("25")


class TestMonthlyView:
    """Tests for month filtering and per-party totals."""

    def test_entries_for_month_keeps_order(self, entry):
        """Test month filtering by date prefix, display order kept."""
        jan_b = entry("2", date="2025-01-20")
        feb = entry("3", date="2025-02-01")
        jan_a = entry("1", date="2025-01-05")
        assert ledger_engine.entries_for_month([jan_b, feb, jan_a], "2025-01") == [jan_b, jan_a]

    def test_entries_for_malformed_month(self, entry):
        """Test that a partial month is rejected rather than prefix-matched."""
        with pytest.raises(ValueError):
            ledger_engine.entries_for_month([entry("1", date="2025-10-05")], "2025-1")

    def test_monthly_stats_include_paid_entries(self, entry):
        """Test that monthly totals count what was spent, paid or not."""
        stats = ledger_engine.monthly_stats([
            entry("10.50", Party.ME, status=EntryStatus.PAID),
            entry("4.50", Party.ME),
            entry("7", Party.FRIEND),
        ])
        assert stats.me_paid == Decimal("15.00")
        assert stats.friend_paid == Decimal("7")


class TestTogglePaid:
    """Tests for the open/paid toggle."""

    def test_toggle_flips_status(self, entry):
        """Test one toggle marks an open entry as paid."""
        original = entry("10")
        toggled = ledger_engine.toggle_paid(original)
        assert toggled.status is EntryStatus.PAID
        assert original.status is EntryStatus.OPEN

    def test_toggle_twice_restores_entry(self, entry):
        """Test that toggling twice is the identity."""
        original = entry("10")
        assert ledger_engine.toggle_paid(ledger_engine.toggle_paid(original)) == original

    def test_toggle_entry_by_id(self, entry):
        """Test toggling one entry in a list leaves the others alone."""
        first, second = entry("1"), entry("2")
        result = ledger_engine.toggle_entry([first, second], second.id)
        assert result[0] is first
        assert result[1].is_paid

    def test_toggle_unknown_id_changes_nothing(self, entry):
        """Test toggling a missing id returns the same entries."""
        entries = [entry("1")]
        assert ledger_engine.toggle_entry(entries, "missing") == entries


class TestSettleMonth:
    """Tests for pay-all."""

    def test_settles_only_the_month(self, entry):
        """Test that entries outside the month are untouched objects."""
        jan_open = entry("10", date="2025-01-03")
        jan_friend = entry("5", Party.FRIEND, date="2025-01-28")
        feb_open = entry("20", date="2025-02-01")
        dec_paid = entry("7", date="2024-12-15", status=EntryStatus.PAID)

        result = ledger_engine.settle_month([jan_open, feb_open, jan_friend, dec_paid], "2025-01")

        assert [e.id for e in result] == [jan_open.id, feb_open.id, jan_friend.id, dec_paid.id]
        assert result[0].is_paid
        assert result[2].is_paid
        assert result[1] is feb_open
        assert result[3] is dec_paid

    def test_settle_month_drops_month_from_balance(self, entry):
        """Test that after pay-all only other months remain outstanding."""
        entries = [
            entry("10", date="2025-01-03"),
            entry("20", date="2025-02-01"),
        ]
        settled = ledger_engine.settle_month(entries, "2025-01")
        assert ledger_engine.compute_balance(settled) == Decimal("20")

    def test_settle_is_idempotent(self, entry):
        """Test that settling an already settled month changes nothing."""
        entries = ledger_engine.settle_month([entry("10", date="2025-01-03")], "2025-01")
        again = ledger_engine.settle_month(entries, "2025-01")
        assert again[0] is entries[0]

    def test_settle_empty_month(self, entry):
        """Test settling a month with no entries returns the input unchanged."""
        entries = [entry("10", date="2025-01-03")]
        assert ledger_engine.settle_month(entries, "2025-06") == entries

    @pytest.mark.parametrize("month", ["2025-1", "", "2025", "2025-00", "jan-2025"])
    def test_malformed_month_raises(self, entry, month):
        """Test that a month that is not YYYY-MM settles nothing."""
        entries = [
            entry("10", date="2025-01-05"),
            entry("10", date="2025-10-05"),
            entry("10", date="2025-11-05"),
            entry("10", date="2024-03-05"),
        ]
        with pytest.raises(ValueError):
            ledger_engine.settle_month(entries, month)
        assert not any(e.is_paid for e in entries)

    def test_month_is_matched_exactly(self, entry):
        """Test that 2025-01 does not reach 2025-10 or 2025-11."""
        entries = [entry("10", date="2025-01-05"), entry("10", date="2025-10-05"), entry("10", date="2025-11-05")]
        result = ledger_engine.settle_month(entries, "2025-01")
        assert [e.is_paid for e in result] == [True, False, False]


class TestEntryListHelpers:
    """Tests for add/replace/remove."""

    def test_add_entry_goes_first(self, entry):
        """Test that new entries are prepended."""
        old, new = entry("1"), entry("2")
        assert ledger_engine.add_entry([old], new) == [new, old]

    def test_replace_entry_by_id(self, entry):
        """Test replacing an entry keeps its position."""
        first, second = entry("1"), entry("2")
        edited = second.model_copy(update={"amount": Decimal("99")})
        result = ledger_engine.replace_entry([first, second], edited)
        assert result == [first, edited]

    def test_remove_entry(self, entry):
        """Test removing an entry by id."""
        first, second = entry("1"), entry("2")
        assert ledger_engine.remove_entry([first, second], first.id) == [second]

    def test_new_entry_is_open(self):
        """Test new entries start open with the counterparty owing."""
        created = ledger_engine.new_entry(Decimal("12"), Party.FRIEND, "Uber", date="2025-01-01")
        assert created.status is EntryStatus.OPEN
        assert created.owes_to is Party.ME


class TestLedgerCreation:
    """Tests for ledger construction and public slugs."""

    def test_new_ledger_is_private_and_empty(self):
        """Test a new ledger has no entries and sharing off."""
        ledger = ledger_engine.new_ledger("Viagem Praia", "João")
        assert ledger.entries == []
        assert ledger.public_read_enabled is False
        assert re.fullmatch(r"viagem-praia-[a-z0-9]{6}", ledger.public_slug)

    def test_slugs_are_unique(self):
        """Test two ledgers with the same title get different slugs."""
        slugs = {ledger_engine.generate_public_slug("Casa") for _ in range(20)}
        assert len(slugs) == 20

    @pytest.mark.parametrize("title,expected", [
        ("Casa Nova", "casa-nova"),
        ("  Aluguel  ", "aluguel"),
        ("Conta #1!", "conta-1"),
        ("   ", "ledger"),
    ])
    def test_slugify(self, title, expected):
        """Test slugify lowercases, dashes spaces and drops punctuation."""
        assert ledger_engine.slugify(title) == expected

    def test_with_entries_returns_new_ledger(self, entry):
        """Test replacing entries leaves the original ledger untouched."""
        ledger = ledger_engine.new_ledger("Casa", "Ana")
        updated = ledger_engine.with_entries(ledger, [entry("5")])
        assert ledger.entries == []
        assert len(updated.entries) == 1
        assert updated.id == ledger.id
