"""
Tests for turning OCR text into candidate transactions.
"""

from datetime import date

import pytest

from extractors.assembler import DescriptionCleaner, TransactionAssembler, clean_description
from extractors.models import PeriodSpec
from extractors.statement_rules import ParserConfig


@pytest.fixture
def assembler(fixed_today):
    return TransactionAssembler(year=2025, period=PeriodSpec("month", 12), today=fixed_today)


def assemble(assembler, *lines):
    return assembler.assemble("\n".join(lines))


class TestStatementLayouts:

    def test_date_and_amount_head_discards_merchant_line_balance(self, assembler):
        transactions = assemble(assembler, "Dec 18, 2025 -$330.74", "Amazon.com $1,204.11")

        assert len(transactions) == 1
        txn = transactions[0]
        assert txn.date == "2025-12-18"
        assert txn.amount == "-330.74"
        assert txn.description == "Amazon.com"
        assert txn.raw_text == "Dec 18, 2025 -$330.74\nAmazon.com $1,204.11"

    def test_pending_amount_uses_first_seen_date(self, assembler):
        transactions = assemble(assembler, "Pending $12.34", "Starbucks", "Jun 1, 2025")

        assert len(transactions) == 1
        txn = transactions[0]
        assert txn.amount == "12.34"
        assert txn.description == "Starbucks"
        assert txn.date == "2025-06-01"

    def test_pending_with_trailing_balance(self, assembler):
        transactions = assemble(assembler, "Pending -$8.50", "Target $2,345.67")

        assert len(transactions) == 1
        assert transactions[0].amount == "-8.50"
        assert transactions[0].description == "Target"
        assert transactions[0].date == "2025-03-04"

    def test_date_header_then_amount_then_merchant(self, assembler):
        transactions = assemble(assembler, "Dec 7, 2025", "-$25.00", "Netflix")

        assert len(transactions) == 1
        assert transactions[0].date == "2025-12-07"
        assert transactions[0].amount == "-25.00"
        assert transactions[0].description == "Netflix"

    def test_continuation_stops_before_date_line(self, assembler):
        transactions = assemble(
            assembler, "Dec 30, 2025 -$23.45", "Uber Trip", "888-555-0199", "Jan 2", "-$9.99", "Spotify"
        )

        assert [t.description for t in transactions] == ["Uber Trip 888-555-0199", "Spotify"]
        assert transactions[1].date == "2025-01-02"

    def test_bare_merchant_and_amount_uses_current_date(self, assembler):
        transactions = assemble(assembler, "Jan 2, 2025", "Uber Trip $23.45", "888-555-0199", "Jan 3, 2025")

        assert len(transactions) == 1
        assert transactions[0].date == "2025-01-02"
        assert transactions[0].amount == "23.45"
        assert transactions[0].description == "Uber Trip 888-555-0199"

    def test_large_amount_after_merchant_is_balance(self, assembler):
        transactions = assemble(
            assembler, "Dec 7, 2025", "Costco Wholesale $85.20", "$2,450.00", "Shell Oil $40.00"
        )

        assert [(t.description, t.amount) for t in transactions] == [
            ("Costco Wholesale", "85.20"),
            ("Shell Oil", "40.00"),
        ]

    def test_small_amount_after_merchant_starts_new_transaction(self, assembler):
        transactions = assemble(assembler, "Dec 7, 2025", "Costco $85.20", "$12.00", "Starbucks")

        assert [(t.description, t.amount, t.date) for t in transactions] == [
            ("Costco", "85.20", "2025-12-07"),
            ("Starbucks", "12.00", "2025-12-07"),
        ]

    def test_balance_threshold_is_injected(self, fixed_today):
        assembler = TransactionAssembler(
            year=2025, parser_config=ParserConfig(balance_threshold=5000), today=fixed_today
        )
        transactions = assemble(assembler, "Dec 7, 2025", "Costco $85.20", "$2,450.00", "Rent")

        assert [(t.description, t.amount) for t in transactions] == [
            ("Costco", "85.20"),
            ("Rent", "2450.00"),
        ]

    def test_header_lines_never_yield_transactions(self, assembler):
        transactions = assemble(
            assembler,
            "11:18",
            "Outstanding balance Dec 7, 2025 $1,234.56",
            "Transaction total -$330.74",
            "Recent activity",
        )
        assert transactions == []

    def test_card_name_banner_is_not_merged_into_description(self, assembler):
        transactions = assemble(assembler, "Dec 18, 2025 -$330.74", "Amazon.com", "Bilt World Elite Mastercard")

        assert [t.description for t in transactions] == ["Amazon.com"]

    def test_card_code_line_is_not_a_transaction(self, assembler):
        assert assemble(assembler, "Dec 7, 2025", "SUBI BOA CB $5.00") == []

    def test_header_date_becomes_context(self, assembler):
        transactions = assemble(assembler, "Activity period Dec 1, 2025 - Dec 31, 2025", "Starbucks $4.50")

        assert len(transactions) == 1
        assert transactions[0].date == "2025-12-01"

    def test_today_fallback_without_any_date(self, assembler):
        transactions = assemble(assembler, "Starbucks $4.50")
        assert transactions[0].date == "2025-03-04"

    def test_blank_line_ends_description(self, assembler):
        transactions = assemble(assembler, "Dec 18, 2025 -$330.74", "Amazon.com", "", "Seattle")
        assert [t.description for t in transactions] == ["Amazon.com"]

    def test_blank_lines_before_merchant_are_skipped(self, assembler):
        transactions = assemble(assembler, "Dec 18, 2025 -$330.74", "", "Amazon.com")
        assert [t.description for t in transactions] == ["Amazon.com"]

    def test_consecutive_date_and_amount_lines_drop_first_head(self, assembler):
        transactions = assemble(assembler, "Dec 18, 2025 -$330.74", "Dec 19, 2025 -$12.00", "Starbucks")

        assert len(transactions) == 1
        assert transactions[0].date == "2025-12-19"
        assert transactions[0].amount == "-12.00"
        assert transactions[0].description == "Starbucks"

    def test_head_at_end_of_text_is_dropped(self, assembler):
        assert assemble(assembler, "Dec 18, 2025 -$330.74") == []

    def test_pending_without_usable_merchant_is_kept_until_resolved(self, assembler):
        transactions = assemble(assembler, "Pending $12.34", "42", "Starbucks")

        assert len(transactions) == 1
        assert transactions[0].description == "Starbucks"
        assert transactions[0].amount == "12.34"

    def test_glyph_prefixed_merchant_is_cleaned(self, assembler):
        transactions = assemble(assembler, "Dec 7, 2025 -$4.50", "®¢ Starbucks ✓")
        assert transactions[0].description == "Starbucks"

    def test_empty_text(self, assembler):
        assert assembler.assemble("") == []
        assert assembler.assemble("   \n  ") == []


class TestTransactionFields:

    def test_ids_period_and_payment_method(self, fixed_today):
        assembler = TransactionAssembler(
            year=2025, period=PeriodSpec("quarter", 4), payment_method="Amex", today=fixed_today
        )
        transactions = assemble(assembler, "Dec 7, 2025", "Costco $85.20", "Shell Oil $40.00")

        assert [t.id for t in transactions] == ["screenshot-0", "screenshot-1"]
        for txn in transactions:
            assert txn.year == 2025
            assert txn.quarter == 4
            assert txn.month is None
            assert txn.payment_method == "Amex"
            assert txn.category == ""
            assert txn.paid_by is None
            assert txn.error is None

    def test_default_payment_method(self, assembler):
        transactions = assemble(assembler, "Starbucks $4.50")
        assert transactions[0].payment_method == "Other"
        assert transactions[0].month == 12

    def test_repeated_runs_are_identical(self, assembler):
        text = "\n".join([
            "Pending $12.34", "Starbucks",
            "Dec 18, 2025 -$330.74", "Amazon.com $1,204.11",
            "Dec 7, 2025", "Costco $85.20",
        ])
        first = assembler.assemble(text)
        second = assembler.assemble(text)

        other = TransactionAssembler(year=2025, period=PeriodSpec("month", 12), today=lambda: date(2025, 3, 4))
        assert first == second == other.assemble(text)
        assert len(first) == 3

    def test_stats(self, assembler):
        assemble(assembler, "Recent activity", "Dec 18, 2025 -$330.74", "Amazon.com $1,204.11", "Seattle WA")
        stats = assembler.get_stats()

        assert stats["transactions_found"] == 1
        assert stats["headers_skipped"] == 1
        assert stats["balances_discarded"] == 1
        assert stats["continuation_merges"] == 1


class TestDescriptionCleaner:

    @pytest.mark.parametrize("raw,expected", [
        ("®¢ Starbucks ✓", "Starbucks"),
        ("9¢ Lyft", "Lyft"),
        ("%¢ Uber Eats", "Uber Eats"),
        ("Pay It Chase Card", "Chase Card"),
        ("Amazon >", "Amazon"),
        ("Whole   Foods @", "Whole Foods"),
        ("Costco", "Costco"),
        ("Chipotle", "Chipotle"),
    ])
    def test_clean(self, raw, expected):
        assert clean_description(raw) == expected

    @pytest.mark.parametrize("description,acceptable", [
        ("Starbucks", True),
        ("AB", False),
        ("12345", False),
        ("Pending", False),
        ("7-Eleven", True),
    ])
    def test_is_acceptable(self, description, acceptable):
        assert DescriptionCleaner().is_acceptable(description) is acceptable
