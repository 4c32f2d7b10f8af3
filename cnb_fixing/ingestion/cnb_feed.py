"""requests-based downloader for the CNB daily fixing feed."""

from __future__ import annotations

from datetime import date

import requests

from cnb_fixing.errors import FetchError
from cnb_fixing.utils.cnb import CNB_DAILY_URL, format_feed_date
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "cnb-fixing-sync/1.0"


class CNBFeedClient:
    """Download ``daily.txt`` for a given fixing date."""

    def __init__(
        self,
        *,
        base_url: str = CNB_DAILY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def fetch(self, rate_date: date) -> str:
        """Return the raw feed text for ``rate_date``.

        Network failures, timeouts and non-2xx responses are raised as
        :class:`FetchError` so callers only deal with one exception type.
        """

        feed_date = format_feed_date(rate_date)
        try:
            response = self.session.get(
                self.base_url,
                params={"date": feed_date},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as exc:
            raise FetchError(
                f"CNB feed timed out after {self.timeout}s for {feed_date}",
                rate_date=rate_date,
            ) from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "?"
            raise FetchError(
                f"CNB feed responded with HTTP {status} for {feed_date}",
                rate_date=rate_date,
            ) from exc
        except requests.RequestException as exc:
            raise FetchError(
                f"CNB feed request failed for {feed_date}: {exc}",
                rate_date=rate_date,
            ) from exc
        LOGGER.info("Fetched CNB feed for %s (%s bytes)", feed_date, len(response.content))
        return response.text

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "CNBFeedClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["CNBFeedClient", "DEFAULT_TIMEOUT"]
