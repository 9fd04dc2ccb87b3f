"""Tests for report text (``ledger_services.summary``) and sharing (``ledger_services.share``)."""

from decimal import Decimal

from ledger_kernel.domain.records import DetailEntry, DetailKind, StockField
from ledger_kernel.domain.session import Language, ViewMode
from ledger_services.share import MemoryClipboard, ShareChannel, share_text
from ledger_services.summary import day_summary, format_day, format_month, ledger_summary, stock_summary
from tests.conftest import TODAY


class TestDaySummary:
    def test_sales_lines_and_totals(self, engine):
        engine.set_quantity("itemA", "small", 2)
        engine.set_quantity("itemA", "large", 1)
        engine.set_details(
            DetailKind.PURCHASE,
            [DetailEntry("p1", "Milk", Decimal("50")), DetailEntry("p2", "Blank", Decimal("0"))],
        )
        engine.set_details(DetailKind.EXPENSE, [DetailEntry("e1", "", Decimal("20"))])
        engine.set_previous_balance("100")
        engine.set_notes("Power cut at 3pm")

        text = day_summary(engine.sales_ledger())

        assert "Daily Sales" in text
        assert "Friday, March 15, 2024" in text
        assert "🥭 Mango | 2 | 1 | 350" in text
        assert "Banana" not in text
        assert "   • Milk: ৳50" in text
        assert "Blank" not in text
        assert "   • Item: ৳20" in text
        assert "*Total Sales: ৳350*" in text
        assert "*Cash in Hand: ৳280*" in text
        assert "*Previous Balance: ৳100*" in text
        assert "*Total Balance: ৳380*" in text
        assert "Power cut at 3pm" in text

    def test_no_sales(self, engine):
        text = day_summary(engine.sales_ledger())
        assert "(No sales recorded)" in text
        assert "Details" not in text
        assert "Notes" not in text

    def test_large_amounts_in_plain_notation(self, engine):
        engine.set_previous_balance("1e30")
        text = day_summary(engine.sales_ledger())
        assert "*Previous Balance: ৳1" + "0" * 30 + "*" in text
        assert "E+" not in text

    def test_bengali(self, engine):
        engine.set_quantity("itemA", "small", 1)
        text = day_summary(engine.sales_ledger(), Language.BN)
        assert "দৈনিক বিক্রি" in text
        assert "আম | 1 | 0 | 100" in text
        assert "শুক্রবার, ১৫ মার্চ, ২০২৪" in text


class TestStockSummary:
    def test_lines_and_grand_total(self, engine, session):
        engine.set_stock_entry("s-milk", StockField.QUANTITY, "4")
        engine.set_stock_entry("s-milk", StockField.UNIT_PRICE, "90")
        engine.set_stock_entry("s-cups", StockField.QUANTITY, "10")

        text = stock_summary(engine.stock_ledger())

        assert "Monthly Stock" in text
        assert "March 2024" in text
        assert "*Milk*: 4 x 90 = ৳360" in text
        assert "Cups" not in text
        assert "*Grand Total: ৳360*" in text

    def test_dispatch_on_view_mode(self, engine, session):
        session.view_mode = ViewMode.STOCK
        assert "Monthly Stock" in ledger_summary(engine.ledger())


class TestDateFormatting:
    def test_format_day(self):
        assert format_day(TODAY, Language.EN) == "Friday, March 15, 2024"

    def test_format_month_bn(self):
        assert format_month("2024-12", Language.BN) == "ডিসেম্বর ২০২৪"


class _Target:
    def __init__(self, fail=False):
        self.fail = fail
        self.shared = []

    def share(self, text):
        if self.fail:
            raise OSError("share sheet unavailable")
        self.shared.append(text)


class TestShareText:
    def test_share_target_used(self):
        target, clipboard = _Target(), MemoryClipboard()
        assert share_text("hi", clipboard, target) is ShareChannel.SHARE_TARGET
        assert target.shared == ["hi"]
        assert clipboard.text is None

    def test_falls_back_on_failure(self, captured_logs):
        clipboard = MemoryClipboard()
        assert share_text("hi", clipboard, _Target(fail=True)) is ShareChannel.CLIPBOARD
        assert clipboard.text == "hi"
        assert any(r["message"] == "share_target_failed_using_clipboard" for r in captured_logs())

    def test_no_target(self):
        clipboard = MemoryClipboard()
        assert share_text("hi", clipboard) is ShareChannel.CLIPBOARD
        assert clipboard.text == "hi"
