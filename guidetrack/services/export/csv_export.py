"""
CSV Export

Renders tour and expense snapshots as spreadsheet-friendly CSV with
Turkish headers. The per-tour income columns are written out as literal
values so the file stands on its own once exported.

Output starts with a UTF-8 BOM so spreadsheet apps detect the encoding.
Platform share/download plumbing is left to the caller; write_export
only puts the text on disk.
"""

import csv
import io
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional

from guidetrack.calculations.dates import format_date, to_date_string
from guidetrack.calculations.metrics import (
    get_tour_base_income,
    get_tour_commissions_total,
    get_tour_duration_days,
    get_tour_tips_total,
    get_tour_total_income,
)
from guidetrack.models.base import utc_now
from guidetrack.models.records import Agency, Expense
from guidetrack.models.tour import PAYMENT_STATUS_LABELS, TOUR_TYPE_LABELS, TourEntry

BOM = "\ufeff"
UNKNOWN_AGENCY = "Bilinmiyor"

TOUR_HEADERS = (
    "Tur Adı",
    "Tür",
    "Başlangıç",
    "Bitiş",
    "Ajans",
    "Günlük Ücret (₺)",
    "Gün Sayısı",
    "Yevmiye Toplamı (₺)",
    "Bahşiş (₺)",
    "Komisyon (₺)",
    "Toplam Gelir (₺)",
    "Ödeme Durumu",
    "Ödenen (₺)",
    "Notlar",
)

EXPENSE_HEADERS = ("Başlık", "Kategori", "Tarih", "Tutar (₺)", "Tekrarlayan", "Notlar")

EXPORT_FILE_PREFIXES = {
    "tours": "guidetrack-turlar",
    "expenses": "guidetrack-giderler",
    "all": "guidetrack-tum-veriler",
}


def _plain_number(value: Decimal) -> str:
    """1500.00 -> '1500', 0.50 -> '0.5'."""
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def _render(rows: Iterable[Iterable[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def build_tours_csv(tours: Iterable[TourEntry], agencies: Iterable[Agency]) -> str:
    """One row per tour, ordered by start date, header row first."""
    agency_names = {agency.id: agency.name for agency in agencies}

    rows = [TOUR_HEADERS]
    for tour in sorted(tours, key=lambda t: t.start_date):
        rows.append((
            tour.title,
            TOUR_TYPE_LABELS[tour.type],
            format_date(tour.start_date),
            format_date(tour.end_date),
            agency_names.get(tour.agency_id, UNKNOWN_AGENCY),
            _plain_number(tour.daily_rate),
            _plain_number(get_tour_duration_days(tour)),
            _plain_number(get_tour_base_income(tour)),
            _plain_number(get_tour_tips_total(tour)),
            _plain_number(get_tour_commissions_total(tour)),
            _plain_number(get_tour_total_income(tour)),
            PAYMENT_STATUS_LABELS[tour.payment_status],
            _plain_number(tour.paid_amount),
            tour.notes,
        ))

    return BOM + _render(rows)


def build_expenses_csv(expenses: Iterable[Expense]) -> str:
    """One row per expense, ordered by date, header row first."""
    rows = [EXPENSE_HEADERS]
    for expense in sorted(expenses, key=lambda e: e.date):
        rows.append((
            expense.title,
            expense.category,
            format_date(expense.date),
            _plain_number(expense.amount),
            "Evet" if expense.is_recurring else "Hayır",
            expense.notes or "",
        ))

    return BOM + _render(rows)


def build_combined_csv(
    tours: Iterable[TourEntry],
    expenses: Iterable[Expense],
    agencies: Iterable[Agency],
) -> str:
    """Tours section, blank line, expenses section."""
    return (
        f"TUR KAYITLARI\n{build_tours_csv(tours, agencies)}"
        f"\n\nGİDER KAYITLARI\n{build_expenses_csv(expenses)}"
    )


def export_filename(kind: str, today: Optional[date] = None) -> str:
    """
    File name for an export of the given kind ('tours', 'expenses' or 'all').

    Without an explicit date the current UTC date is used.

    Raises:
        ValueError: For an unknown kind
    """
    if kind not in EXPORT_FILE_PREFIXES:
        raise ValueError(f"Unknown export kind: {kind}")
    today = today or utc_now().date()
    return f"{EXPORT_FILE_PREFIXES[kind]}-{to_date_string(today)}.csv"


def write_export(content: str, directory: Path, filename: str) -> Path:
    """Write an export to directory/filename (UTF-8) and return the path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(content, encoding="utf-8")
    return path
