"""Today in History source.

Collects historical events for the current date from muffinlabs.
https://history.muffinlabs.com/
"""

from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

from onefact.config.sources import TodayInHistoryConfig
from onefact.core.logging import get_logger
from onefact.services.collector.base import BaseSource, RawRecord

logger = get_logger(__name__)


def _today() -> date:
    return datetime.now(UTC).date()


class TodayInHistorySource(BaseSource[TodayInHistoryConfig]):
    """Historical events for today's date.

    Each event becomes "On this day in YEAR: TEXT" in the History category.
    """

    name = "today_in_history"

    def __init__(self, *args: Any, today: Callable[[], date] = _today, **kwargs: Any) -> None:
        """Initialize source.

        Args:
            *args: BaseSource arguments
            today: Clock returning the date to query
            **kwargs: BaseSource keyword arguments
        """
        super().__init__(*args, **kwargs)
        self._today = today

    @classmethod
    def build_config(cls, overrides: dict[str, Any]) -> TodayInHistoryConfig:
        """Build TodayInHistoryConfig from overrides.

        Args:
            overrides: Configuration overrides (any TodayInHistoryConfig field)

        Returns:
            TodayInHistoryConfig instance
        """
        return TodayInHistoryConfig(**overrides)

    async def get_facts(self) -> list[RawRecord]:
        """Collect today's events.

        Returns:
            Up to ``limit`` RawRecord in API order

        Raises:
            SourceFetchError: If the request fails
        """
        day = self._today()
        url = f"{self._config.api_url.rstrip('/')}/{day.month}/{day.day}"
        logger.info("Collecting from Today in History", month=day.month, day=day.day)

        data = await self._fetch_json(url)
        events = data.get("data", {}).get("Events", []) if isinstance(data, dict) else []

        records: list[RawRecord] = []
        for event in events:
            if len(records) >= self._config.limit:
                break
            record = self._to_raw_record(event, day)
            if record:
                records.append(record)

        logger.info(
            "Today in History collection complete",
            collected=len(records),
            fetched=len(events),
        )
        return records

    def _to_raw_record(self, event: dict[str, Any], day: date) -> RawRecord | None:
        """Convert an event to RawRecord.

        Args:
            event: Event JSON object with year, text and links
            day: Queried date

        Returns:
            RawRecord or None if the event text is unusable
        """
        year = str(event.get("year", "")).strip()
        text = str(event.get("text", "")).strip()
        if not year or not text:
            return None

        content = self.clean_extract(f"On this day in {year}: {text}")
        if content is None:
            return None

        links = [link["link"] for link in event.get("links", []) if link.get("link")]
        return RawRecord(
            content=content,
            source=self.name,
            category="History",
            tags=["history", "on this day"],
            urls=links[:1],
            metadata={"year": year, "date": f"{day.month:02d}-{day.day:02d}"},
        )

    async def health_check(self) -> bool:
        """Check if the history API is accessible.

        Returns:
            True if API responds successfully
        """
        try:
            day = self._today()
            response = await self._http_client.get(
                f"{self._config.api_url.rstrip('/')}/{day.month}/{day.day}",
                timeout=self._config.request_timeout,
            )
            return response.status_code == 200
        except Exception as e:
            logger.warning("Today in History health check failed", error=str(e))
            return False


__all__ = ["TodayInHistorySource"]
