"""
ledger_services.summary -- messaging-ready text reports.

Responsibility:
    Renders a day's sales ledger or a month's stock ledger as plain text
    (WhatsApp-style ``*bold*`` markers) in English or Bengali.  Pure
    presentation over totals computed by ``ledger_kernel.domain.totals``;
    nothing in the kernel depends on it.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from ledger_kernel.domain.records import DayRecord, DetailEntry
from ledger_kernel.domain.session import Language
from ledger_kernel.domain.totals import DayTotals, SalesLedger, StockLedger
from ledger_kernel.domain.values import decimal_to_str, parse_day_key, parse_month_key

TRANSLATIONS: dict[Language, dict[str, str]] = {
    Language.EN: {
        "title": "Smoothie Bar",
        "daily_sales": "Daily Sales",
        "monthly_stock": "Monthly Stock",
        "item_header": "Item",
        "small": "250ml",
        "large": "350ml",
        "subtotal": "Subtotal",
        "no_sales": "(No sales recorded)",
        "purchase": "Purchase",
        "expense": "Expense",
        "details": "Details",
        "item": "Item",
        "total": "Total",
        "total_sales": "Total Sales",
        "cash_in_hand": "Cash in Hand",
        "previous_balance": "Previous Balance",
        "total_balance": "Total Balance",
        "notes": "Notes",
        "grand_total": "Grand Total",
        "taka": "৳",
    },
    Language.BN: {
        "title": "স্মুদি বার",
        "daily_sales": "দৈনিক বিক্রি",
        "monthly_stock": "মাসিক স্টক",
        "item_header": "আইটেম",
        "small": "২৫০মিলি",
        "large": "৩৫০মিলি",
        "subtotal": "সাবটোটাল",
        "no_sales": "(কোনো বিক্রি নেই)",
        "purchase": "ক্রয়",
        "expense": "খরচ",
        "details": "বিস্তারিত",
        "item": "আইটেম",
        "total": "মোট",
        "total_sales": "মোট বিক্রি",
        "cash_in_hand": "হাতে নগদ",
        "previous_balance": "আগের ব্যালেন্স",
        "total_balance": "মোট ব্যালেন্স",
        "notes": "নোট",
        "grand_total": "সর্বমোট",
        "taka": "৳",
    },
}

_EN_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_BN_MONTHS = (
    "জানুয়ারী", "ফেব্রুয়ারী", "মার্চ", "এপ্রিল", "মে", "জুন",
    "জুলাই", "আগস্ট", "সেপ্টেম্বর", "অক্টোবর", "নভেম্বর", "ডিসেম্বর",
)
_EN_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_BN_WEEKDAYS = ("সোমবার", "মঙ্গলবার", "বুধবার", "বৃহস্পতিবার", "শুক্রবার", "শনিবার", "রবিবার")
_BN_DIGITS = str.maketrans("0123456789", "০১২৩৪৫৬৭৮৯")

RULE = "--------------------------------"
HEAVY_RULE = "━━━━━━━━━━━━━━━"


def format_day(key: str, language: Language) -> str:
    """'Monday, October 19, 2026' / 'সোমবার, ১৯ অক্টোবর, ২০২৬'."""
    day: date = parse_day_key(key)
    if language is Language.BN:
        text = f"{_BN_WEEKDAYS[day.weekday()]}, {day.day} {_BN_MONTHS[day.month - 1]}, {day.year}"
        return text.translate(_BN_DIGITS)
    return f"{_EN_WEEKDAYS[day.weekday()]}, {_EN_MONTHS[day.month - 1]} {day.day}, {day.year}"


def format_month(key: str, language: Language) -> str:
    year, month = parse_month_key(key)
    if language is Language.BN:
        return f"{_BN_MONTHS[month - 1]} {year}".translate(_BN_DIGITS)
    return f"{_EN_MONTHS[month - 1]} {year}"


def _money(t: dict[str, str], amount: Decimal) -> str:
    return f"{t['taka']}{decimal_to_str(amount)}"


def _detail_section(
    t: dict[str, str],
    heading_icon: str,
    label: str,
    total: Decimal,
    entries: tuple[DetailEntry, ...],
) -> list[str]:
    lines = [f"{heading_icon} *{label} {t['details']}*:"]
    for entry in entries:
        if entry.amount > 0:
            lines.append(f"   • {entry.description or t['item']}: {_money(t, entry.amount)}")
    lines.append(f"   *{t['total']} {label}: {_money(t, total)}*")
    lines.append("")
    return lines


def day_summary(ledger: SalesLedger, language: Language = Language.EN) -> str:
    """Daily sales report for sharing."""
    t = TRANSLATIONS[language]
    record: DayRecord = ledger.record
    totals: DayTotals = ledger.totals()

    lines = [
        f"📊 *{t['title']} - {t['daily_sales']}*",
        f"📅 {format_day(ledger.key, language)}",
        "",
        f"*{t['item_header']} | {t['small']} | {t['large']} | {t['subtotal']}*",
        RULE,
    ]

    sold = [line for line in totals.lines if line.has_sales]
    for line in sold:
        icon = line.product.icon or "🥤"
        lines.append(
            f"{icon} {line.product.display_name(language.value)} | {line.small} | "
            f"{line.large} | {decimal_to_str(line.line_total)}"
        )
    if not sold:
        lines.append(t["no_sales"])
    lines.append("")

    if record.purchase_total > 0:
        lines += _detail_section(t, "🛒", t["purchase"], record.purchase_total, record.purchase_details)
    if record.expense_total > 0:
        lines += _detail_section(t, "💸", t["expense"], record.expense_total, record.expense_details)

    lines += [
        RULE,
        f"💰 *{t['total_sales']}: {_money(t, totals.sales_total)}*",
        f"💵 *{t['cash_in_hand']}: {_money(t, totals.cash_in_hand)}*",
        f"🏦 *{t['previous_balance']}: {_money(t, totals.previous_balance)}*",
        f"⚖️ *{t['total_balance']}: {_money(t, totals.total_balance)}*",
    ]
    if record.notes:
        lines += ["", f"📝 *{t['notes']}*: {record.notes}"]

    return "\n".join(lines) + "\n"


def stock_summary(ledger: StockLedger, language: Language = Language.EN) -> str:
    """Monthly stock valuation report for sharing."""
    t = TRANSLATIONS[language]
    totals = ledger.totals()

    lines = [
        f"📦 *{t['title']} - {t['monthly_stock']}*",
        f"📅 {format_month(ledger.key, language)}",
        "",
    ]
    for line in totals.lines:
        if line.line_total > 0:
            lines.append(
                f"🛒 *{line.item.display_name(language.value)}*: "
                f"{decimal_to_str(line.quantity)} x {decimal_to_str(line.unit_price)} = "
                f"{_money(t, line.line_total)}"
            )
    lines += [HEAVY_RULE, f"💎 *{t['grand_total']}: {_money(t, totals.grand_total)}*"]
    return "\n".join(lines) + "\n"


def ledger_summary(ledger: SalesLedger | StockLedger, language: Language = Language.EN) -> str:
    """Dispatch on the ledger variant."""
    if ledger.kind == "stock":
        return stock_summary(ledger, language)
    return day_summary(ledger, language)
