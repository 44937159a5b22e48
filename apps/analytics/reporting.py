"""
Reporting Module
=================

Pure computations over a set of payments for the dashboard and the
exportable report. Nothing here touches the database or the clock: callers
fetch the records (one owner's payments) and pass the reference date.

Functions:
    summarize: Revenue, weight and average transaction value.
    category_breakdown: Revenue per canonical coffee type.
    monthly_series: Revenue per calendar month, all years folded together.
    growth: Change between the trailing 30 days and the 30 days before.
    growth_pct: Percentage change between two values.
    dashboard: All of the above in one structure.
    build_report: Numbered rows and totals for the spreadsheet export.

Example:
    Dashboard for the current user::

        from apps.analytics.reporting import dashboard

        payments = PaymentStore().find_all(request.user.id)
        data = dashboard(payments, ['Kopi Bubuk', 'Kopi Bijian'], date.today())
        print(data.stats.total, data.stats.growth.total)

Note:
    Records only need ``date``, ``coffee_type``, ``weight_kg`` and
    ``total_price`` attributes; model instances and simple namespaces both
    work.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence

from .exceptions import InvalidPeriodError

MONTH_NAMES = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)

# Used for the export file name, e.g. laporan_excel_maret_2025.xlsx
INDONESIAN_MONTH_NAMES = (
    'januari', 'februari', 'maret', 'april', 'mei', 'juni',
    'juli', 'agustus', 'september', 'oktober', 'november', 'desember',
)

WINDOW_DAYS = 30

REPORT_TITLE = 'LAPORAN PEMBAYARAN KASIR KOPI'
REPORT_HEADERS = ('No', 'Tanggal', 'Jenis Kopi', 'Berat (kg)', 'Total Harga', 'User')


@dataclass(frozen=True)
class GrowthMetrics:
    total: int = 0
    kg: int = 0
    avg: int = 0


@dataclass(frozen=True)
class Summary:
    total: int = 0
    total_kg: Decimal = Decimal('0')
    avg: Decimal = Decimal('0')
    count: int = 0


@dataclass(frozen=True)
class CategoryTotal:
    type: str
    value: int


@dataclass(frozen=True)
class MonthTotal:
    month: str
    total: int


@dataclass(frozen=True)
class DashboardStats:
    total: int
    total_kg: Decimal
    avg: Decimal
    growth: GrowthMetrics


@dataclass(frozen=True)
class Dashboard:
    stats: DashboardStats
    pie_data: List[CategoryTotal]
    bar_data: List[MonthTotal]


@dataclass(frozen=True)
class ReportRow:
    no: int
    date: date
    coffee_type: str
    weight_kg: Decimal
    total_price: int
    user: str


@dataclass(frozen=True)
class Report:
    title: str
    filename: str
    month: Optional[int]
    year: Optional[int]
    headers: Sequence[str] = REPORT_HEADERS
    rows: List[ReportRow] = field(default_factory=list)
    total_price: int = 0
    total_kg: Decimal = Decimal('0')


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _weight(record) -> Decimal:
    return Decimal(str(record.weight_kg))


def summarize(records: Iterable) -> Summary:
    """
    Total revenue, total weight and average transaction value.

    Returns an all-zero Summary for an empty record set.
    """
    records = list(records)
    count = len(records)
    total = sum(int(r.total_price) for r in records)
    total_kg = sum((_weight(r) for r in records), Decimal('0'))
    avg = Decimal(total) / count if count else Decimal('0')
    return Summary(total=total, total_kg=total_kg, avg=avg, count=count)


def category_breakdown(records: Iterable, categories: Sequence[str]) -> List[CategoryTotal]:
    """
    Revenue per canonical coffee type, in the order of ``categories``.

    Labels are compared case-insensitively. Records with any other label
    are left out here but still count in :func:`summarize`.
    """
    totals = {label.casefold(): 0 for label in categories}
    for record in records:
        key = (record.coffee_type or '').casefold()
        if key in totals:
            totals[key] += int(record.total_price)
    return [CategoryTotal(type=label, value=totals[label.casefold()]) for label in categories]


def monthly_series(records: Iterable) -> List[MonthTotal]:
    """
    Revenue per calendar month, Jan through Dec.

    Always 12 entries; months without sales are 0. The year is ignored, so
    March 2024 and March 2025 land in the same bucket.
    """
    buckets = [0] * 12
    for record in records:
        buckets[_as_date(record.date).month - 1] += int(record.total_price)
    return [MonthTotal(month=name, total=buckets[i]) for i, name in enumerate(MONTH_NAMES)]


def growth_pct(current, previous) -> int:
    """
    Percentage change from ``previous`` to ``current``, whole points.

    Both zero gives 0; growth from zero gives 100. Halves round away from
    zero (ROUND_HALF_UP on Decimal).

        >>> growth_pct(10, 5)
        100
        >>> growth_pct(5, 10)
        -50
    """
    current = Decimal(str(current))
    previous = Decimal(str(previous))
    if previous == 0 and current == 0:
        return 0
    if previous == 0:
        return 100
    change = (current - previous) / previous * 100
    return int(change.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def split_windows(records: Iterable, now, days: int = WINDOW_DAYS):
    """
    Split records into the trailing window and the one before it.

    current: ``now - days <= date <= now``
    prior:   ``now - 2*days <= date < now - days``
    """
    today = _as_date(now)
    current_start = today - timedelta(days=days)
    prior_start = today - timedelta(days=2 * days)

    current, prior = [], []
    for record in records:
        day = _as_date(record.date)
        if current_start <= day <= today:
            current.append(record)
        elif prior_start <= day < current_start:
            prior.append(record)
    return current, prior


def growth(records: Iterable, now) -> GrowthMetrics:
    """
    Growth of revenue, weight and average value over the trailing 30 days.

    Args:
        records: Payments to consider.
        now: Reference date (or datetime) closing the current window.
    """
    current, prior = split_windows(records, now)
    cur = summarize(current)
    prev = summarize(prior)
    return GrowthMetrics(
        total=growth_pct(cur.total, prev.total),
        kg=growth_pct(cur.total_kg, prev.total_kg),
        avg=growth_pct(cur.avg, prev.avg),
    )


def dashboard(records: Iterable, categories: Sequence[str], now) -> Dashboard:
    """Everything the dashboard page shows: totals with growth, pie and bar data."""
    records = list(records)
    summary = summarize(records)
    return Dashboard(
        stats=DashboardStats(
            total=summary.total,
            total_kg=summary.total_kg,
            avg=summary.avg,
            growth=growth(records, now),
        ),
        pie_data=category_breakdown(records, categories),
        bar_data=monthly_series(records),
    )


def filter_by_month(records: Iterable, month: Optional[int] = None, year: Optional[int] = None) -> list:
    """Records in the given month (1-12) and/or year; None means any."""
    selected = []
    for record in records:
        day = _as_date(record.date)
        if month is not None and day.month != month:
            continue
        if year is not None and day.year != year:
            continue
        selected.append(record)
    return selected


def report_filename(month: int, year: int) -> str:
    return f"laporan_excel_{INDONESIAN_MONTH_NAMES[month - 1]}_{year}.xlsx"


def build_report(records: Iterable, today, month: Optional[int] = None, year: Optional[int] = None) -> Report:
    """
    Rows and totals handed to the spreadsheet writer.

    Args:
        records: Payments, already in display order.
        today: Reference date; names the file when no period is chosen.
        month: Optional month filter (1-12).
        year: Optional year filter.

    Returns:
        Report with rows numbered from 1, the grand totals and a file name
        like ``laporan_excel_maret_2025.xlsx``.

    Raises:
        InvalidPeriodError: If ``month`` is outside 1-12.
    """
    if month is not None and not 1 <= month <= 12:
        raise InvalidPeriodError("Month must be between 1 and 12")

    today = _as_date(today)
    selected = filter_by_month(records, month, year)

    rows = [
        ReportRow(
            no=i,
            date=_as_date(record.date),
            coffee_type=record.coffee_type,
            weight_kg=_weight(record),
            total_price=int(record.total_price),
            user=_owner_email(record),
        )
        for i, record in enumerate(selected, start=1)
    ]
    summary = summarize(selected)

    return Report(
        title=REPORT_TITLE,
        filename=report_filename(month or today.month, year or today.year),
        month=month,
        year=year,
        rows=rows,
        total_price=summary.total,
        total_kg=summary.total_kg,
    )


def _owner_email(record) -> str:
    owner = getattr(record, 'owner', None)
    return getattr(owner, 'email', None) or '-'
