from datetime import date, timedelta


def get_week_start(today=None):
    today = today or date.today()
    return today - timedelta(days=today.weekday())


def get_month_start(today=None):
    today = today or date.today()
    return today.replace(day=1)


def parse_iso_date(value):
    """Return a date for an ISO ``YYYY-MM-DD`` string, None when blank."""
    if value is None:
        return None

    if not isinstance(value, str):
        raise ValueError("Date must be a string in YYYY-MM-DD format")

    value = value.strip()
    if not value:
        return None

    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValueError(f"Invalid date: {value}")
