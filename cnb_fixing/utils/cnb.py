"""CNB feed constants and the single date adapter used when building feed URLs."""

from __future__ import annotations

from datetime import date

CNB_DAILY_URL = (
    "https://www.cnb.cz/en/financial_markets/foreign_exchange_market/"
    "exchange_rate_fixing/daily.txt"
)
FEED_HEADER = "Country|Currency|Amount|Code|Rate"
FEED_DATE_FORMAT = "%m.%d.%Y"


def format_feed_date(day: date) -> str:
    """Render ``day`` the way the daily.txt ``date`` query parameter expects it."""

    return day.strftime(FEED_DATE_FORMAT)


__all__ = [
    "CNB_DAILY_URL",
    "FEED_DATE_FORMAT",
    "FEED_HEADER",
    "format_feed_date",
]
