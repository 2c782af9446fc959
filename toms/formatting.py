"""Formatting helpers: currency, dates, ages and nights."""
import math
from datetime import date, datetime, timezone
from typing import Optional, Tuple, Union

DateLike = Union[str, date, datetime, None]

CURRENCY_SYMBOLS = {
    "usd": "$",
    "eur": "€",
    "gbp": "£",
    "try": "₺",
    "aed": "AED",
    "sar": "SAR",
}

MONTH_ABBR = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

SECONDS_PER_DAY = 24 * 60 * 60


def currency_symbol(code: Optional[str]) -> str:
    """Map a currency code (any case) to its display symbol."""
    code = (code or "").strip()
    return CURRENCY_SYMBOLS.get(code.lower(), code.upper())


def format_amount(amount: float) -> str:
    """Two decimals, thousands grouped: 1234.5 -> '1,234.50'."""
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        amount = 0.0
    if not math.isfinite(amount):
        amount = 0.0
    return f"{amount:,.2f}"


def format_currency(amount: float, code: Optional[str]) -> str:
    """Format an amount with its currency symbol, e.g. '$ 1,234.50'."""
    return f"{currency_symbol(code)} {format_amount(amount)}"


def parse_datetime(value: DateLike) -> Optional[datetime]:
    """Parse an ISO-ish date or datetime into a naive UTC datetime.

    Returns None for empty or unparsable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value: DateLike) -> Optional[date]:
    """Parse an ISO-ish date string. Returns None when unparsable."""
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def format_date(value: DateLike) -> str:
    """Format as 'DD Mon YYYY' for documents; '' when unparsable."""
    d = parse_date(value)
    if d is None:
        return ""
    return f"{d.day:02d} {MONTH_ABBR[d.month - 1]} {d.year}"


def format_display_date(value: DateLike) -> str:
    """Format as 'DD/MM/YYYY' for on-screen lists; '' when unparsable."""
    d = parse_date(value)
    if d is None:
        return ""
    return d.strftime("%d/%m/%Y")


def format_timestamp(now: Optional[datetime] = None) -> Tuple[str, str]:
    """Header lines printed on the top right of documents."""
    now = now or datetime.now()
    return (
        f"DATE : {now.day}.{now.month}.{now.year}",
        f"TIME : {now.hour}:{now.minute:02d}",
    )


def calculate_nights(checkin: DateLike, checkout: DateLike) -> int:
    """Nights between two dates: max(0, ceil(days)); 0 if either is missing."""
    start = parse_datetime(checkin)
    end = parse_datetime(checkout)
    if start is None or end is None:
        return 0
    days = (end - start).total_seconds() / SECONDS_PER_DAY
    return max(0, math.ceil(days))


def calculate_age(birth_date: DateLike, today: Optional[date] = None) -> int:
    """Whole years since birth_date; 0 when the date is unparsable."""
    birth = parse_date(birth_date)
    if birth is None:
        return 0
    today = today or date.today()
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def safe_filename(name: str) -> str:
    """Create a safe filename fragment."""
    safe = "".join(c for c in str(name) if c.isalnum() or c in (' ', '-', '_', '.'))
    return safe.strip().replace(' ', '_')[:80]
