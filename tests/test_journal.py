"""Tests for vatcentral.journal."""

import pytest

from vatcentral.config import VATConfig
from vatcentral.journal import (
    NOTHING_TRANSFERRED,
    JournalLine,
    compute_totals,
    parse_amount,
)
from tests.helpers import make_line


# ---------------------------------------------------------------------------
# parse_amount
# ---------------------------------------------------------------------------


class TestParseAmount:
    def test_plain_number_string(self):
        assert parse_amount("2600") == 2600.0

    def test_comma_decimal_separator(self):
        assert parse_amount("2600,50") == 2600.5

    def test_strips_non_numeric_characters(self):
        assert parse_amount("2600.00 EUR") == 2600.0

    def test_keeps_leading_number_only(self):
        assert parse_amount("12.5.3") == 12.5

    def test_unparsable_returns_zero(self):
        assert parse_amount("abc") == 0.0
        assert parse_amount("") == 0.0
        assert parse_amount(".") == 0.0

    def test_numeric_values_pass_through(self):
        assert parse_amount(130) == 130.0
        assert parse_amount(-5.0) == -5.0

    def test_none_is_zero(self):
        assert parse_amount(None) == 0.0


# ---------------------------------------------------------------------------
# JournalLine / totals
# ---------------------------------------------------------------------------


class TestJournalLine:
    def test_invalid_original_side_raises(self):
        with pytest.raises(ValueError, match="Invalid original side"):
            JournalLine("id", "4110", "VAT", original_side="left")


class TestComputeTotals:
    def test_empty_journal_is_balanced(self):
        totals = compute_totals([])
        assert totals.debit == 0
        assert totals.credit == 0
        assert totals.is_balanced is True

    def test_balanced_lines(self):
        totals = compute_totals([
            make_line("4110", credit=5200),
            make_line("4510", debit=7800),
            make_line("4519", credit=2600, is_manual=True),
        ])
        assert totals.debit == 7800
        assert totals.credit == 7800
        assert totals.diff == 0
        assert totals.is_balanced is True

    def test_unbalanced_lines(self):
        totals = compute_totals([make_line("4110", credit=5200), make_line("4510", debit=7800)])
        assert totals.diff == pytest.approx(2600)
        assert totals.is_balanced is False

    def test_rounding_noise_is_absorbed(self):
        totals = compute_totals([
            make_line("a", debit=0.1),
            make_line("b", debit=0.2),
            make_line("c", credit=0.3),
        ])
        assert totals.is_balanced is True

    def test_custom_tolerance(self):
        cfg = VATConfig(numeric_tolerance=1.0)
        totals = compute_totals([make_line("a", debit=10.5), make_line("b", credit=10)], cfg)
        assert totals.is_balanced is True


# ---------------------------------------------------------------------------
# Transfer
# ---------------------------------------------------------------------------


class TestTransfer:
    def test_transfer_copies_rows(self, journal):
        added = journal.transfer(["4110", "4510"])
        assert [line.code for line in added] == ["4110", "4510"]
        first = journal.lines[0]
        assert first.name == "VAT recoverable on purchases"
        assert (first.debit, first.credit) == (5200, 0)
        assert first.is_manual is False

    def test_transfer_records_original_side(self, journal):
        journal.transfer(["4110", "4510"])
        assert [line.original_side for line in journal.lines] == ["debit", "credit"]

    def test_transfer_follows_trial_balance_order(self, journal):
        journal.transfer(["4510", "4110"])
        assert [line.code for line in journal.lines] == ["4110", "4510"]

    def test_transfer_skips_codes_already_present(self, journal):
        journal.transfer(["4110"])
        added = journal.transfer(["4110", "4510"])
        assert [line.code for line in added] == ["4510"]
        assert len(journal.lines) == 2

    def test_transfer_of_nothing_new_sets_notice(self, journal):
        journal.transfer(["4110"])
        added = journal.transfer(["4110"])
        assert added == []
        assert len(journal.lines) == 1
        assert journal.notice == NOTHING_TRANSFERRED

    def test_empty_selection_sets_notice(self, journal):
        assert journal.transfer([]) == []
        assert journal.lines == []
        assert journal.notice == NOTHING_TRANSFERRED

    def test_single_code_string_raises(self, journal):
        with pytest.raises(TypeError, match="collection of account codes"):
            journal.transfer("4110")
        assert journal.lines == []

    def test_unknown_codes_are_ignored(self, journal):
        assert journal.transfer(["9999"]) == []
        assert journal.notice == NOTHING_TRANSFERRED

    def test_successful_transfer_clears_notice(self, journal):
        journal.transfer([])
        journal.transfer(["4110"])
        assert journal.notice is None

    def test_non_vat_rows_can_be_transferred(self, journal):
        journal.transfer(["4400"])
        assert journal.lines[0].code == "4400"

    def test_line_ids_are_unique(self, journal):
        journal.transfer(["4110", "4510", "4400"])
        ids = [line.line_id for line in journal.lines]
        assert len(set(ids)) == 3


# ---------------------------------------------------------------------------
# Reverse
# ---------------------------------------------------------------------------


class TestReverse:
    def test_reverse_swaps_sides(self, journal):
        line = journal.transfer(["4110"])[0]
        assert journal.reverse(line.line_id) is True
        assert (line.debit, line.credit) == (0, 5200)

    def test_reverse_twice_restores_amounts(self, journal):
        line = journal.transfer(["4510"])[0]
        journal.reverse(line.line_id)
        journal.reverse(line.line_id)
        assert (line.debit, line.credit) == (0, 7800)

    def test_reverse_keeps_original_side(self, journal):
        line = journal.transfer(["4110"])[0]
        journal.reverse(line.line_id)
        assert line.original_side == "debit"

    def test_reverse_unknown_line(self, journal):
        assert journal.reverse("nope") is False

    def test_reverse_manual_line(self, journal):
        line = journal.add_manual("4519", 2600)
        journal.reverse(line.line_id)
        assert (line.debit, line.credit) == (2600, 0)


# ---------------------------------------------------------------------------
# Manual lines
# ---------------------------------------------------------------------------


class TestAddManual:
    def test_payable_centralizer_on_credit(self, journal):
        line = journal.add_manual("4519", 2600)
        assert (line.debit, line.credit) == (0, 2600)
        assert line.is_manual is True
        assert line.original_side is None

    def test_recoverable_centralizer_on_debit(self, journal):
        line = journal.add_manual("4119", "130,00")
        assert (line.debit, line.credit) == (130, 0)

    def test_name_comes_from_centralizer(self, journal):
        line = journal.add_manual("4519", 10)
        assert line.name == "VAT administration (payable)"

    @pytest.mark.parametrize("amount", [0, -5, "0", "abc", "", None, float("nan"), float("inf")])
    def test_invalid_amount_is_ignored(self, journal, amount):
        assert journal.add_manual("4519", amount) is None
        assert journal.lines == []

    def test_unknown_account_is_ignored(self, journal):
        assert journal.add_manual("4400", 100) is None
        assert journal.lines == []

    def test_manual_lines_are_not_merged(self, journal):
        journal.add_manual("4519", 100)
        journal.add_manual("4519", 100)
        assert [line.code for line in journal.lines] == ["4519", "4519"]


# ---------------------------------------------------------------------------
# Remove / reset
# ---------------------------------------------------------------------------


class TestRemoveAndReset:
    def test_remove_one_line(self, journal):
        first, second = journal.transfer(["4110", "4510"])
        assert journal.remove(first.line_id) is True
        assert journal.lines == [second]

    def test_remove_unknown_line(self, journal):
        journal.transfer(["4110"])
        assert journal.remove("nope") is False
        assert len(journal.lines) == 1

    def test_removed_code_can_be_transferred_again(self, journal):
        line = journal.transfer(["4110"])[0]
        journal.remove(line.line_id)
        assert len(journal.transfer(["4110"])) == 1

    def test_reset_clears_lines_and_notice(self, journal):
        journal.transfer(["4110"])
        journal.transfer(["4110"])
        assert journal.reset() is True
        assert journal.lines == []
        assert journal.notice is None


# ---------------------------------------------------------------------------
# Locking
# ---------------------------------------------------------------------------


class TestLocking:
    @pytest.fixture
    def locked_journal(self, journal):
        journal.transfer(["4110", "4510"])
        journal.add_manual("4519", 2600)
        journal.lock()
        return journal

    def _amounts(self, journal):
        return [(line.code, line.debit, line.credit) for line in journal.lines]

    def test_transfer_refused(self, locked_journal):
        before = self._amounts(locked_journal)
        assert locked_journal.transfer(["4400"]) == []
        assert self._amounts(locked_journal) == before
        assert locked_journal.notice is None

    def test_reverse_refused(self, locked_journal):
        before = self._amounts(locked_journal)
        assert locked_journal.reverse(locked_journal.lines[0].line_id) is False
        assert self._amounts(locked_journal) == before

    def test_add_manual_refused(self, locked_journal):
        assert locked_journal.add_manual("4519", 1) is None
        assert len(locked_journal.lines) == 3

    def test_remove_refused(self, locked_journal):
        assert locked_journal.remove(locked_journal.lines[0].line_id) is False
        assert len(locked_journal.lines) == 3

    def test_reset_refused(self, locked_journal):
        assert locked_journal.reset() is False
        assert len(locked_journal.lines) == 3


class TestSnapshot:
    def test_snapshot_is_detached(self, journal):
        journal.transfer(["4110"])
        snap = journal.snapshot()
        journal.reverse(journal.lines[0].line_id)
        assert (snap[0].debit, snap[0].credit) == (5200, 0)

    def test_totals_follow_lines(self, journal):
        journal.transfer(["4110", "4510"])
        assert journal.totals.debit == 5200
        assert journal.totals.credit == 7800
