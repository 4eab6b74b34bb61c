"""NASA Astronomy Picture of the Day source.

Uses the APOD explanation text as a space fact.
https://api.nasa.gov/
"""

from typing import Any

from onefact.config.sources import NasaApodConfig
from onefact.core.exceptions import SourceFetchError
from onefact.core.logging import get_logger
from onefact.services.collector.base import BaseSource, RawRecord

logger = get_logger(__name__)

APOD_PAGE_URL = "https://apod.nasa.gov/apod/astropix.html"


class NasaApodSource(BaseSource[NasaApodConfig]):
    """NASA APOD source.

    Requests today's entry, or ``count`` random entries when count > 1.
    Explanations longer than the extract window are dropped.
    """

    name = "nasa_apod"

    @classmethod
    def build_config(cls, overrides: dict[str, Any]) -> NasaApodConfig:
        """Build NasaApodConfig from overrides.

        Args:
            overrides: Configuration overrides (any NasaApodConfig field)

        Returns:
            NasaApodConfig instance
        """
        return NasaApodConfig(**overrides)

    async def get_facts(self) -> list[RawRecord]:
        """Collect APOD entries.

        Returns:
            List of RawRecord (possibly empty)

        Raises:
            SourceFetchError: If the APOD request fails
        """
        params: dict[str, Any] = {"api_key": self._config.api_key, "thumbs": "true"}
        if self._config.count > 1:
            params["count"] = self._config.count

        logger.info("Collecting from NASA APOD", count=self._config.count)
        data = await self._fetch_json(self._config.api_url, params=params)

        entries = data if isinstance(data, list) else [data]
        if not all(isinstance(entry, dict) for entry in entries):
            raise SourceFetchError(
                self.name, "unexpected response shape", endpoint=self._config.api_url
            )

        records = [r for r in (self._to_raw_record(entry) for entry in entries) if r]
        logger.info("NASA APOD collection complete", collected=len(records), fetched=len(entries))
        return records

    def _to_raw_record(self, entry: dict[str, Any]) -> RawRecord | None:
        """Convert an APOD entry to RawRecord.

        Args:
            entry: APOD JSON object

        Returns:
            RawRecord or None if the explanation is unusable
        """
        content = self.clean_extract(entry.get("explanation"))
        if content is None:
            logger.debug("Skipping APOD entry", title=entry.get("title"), date=entry.get("date"))
            return None

        media_type = entry.get("media_type", "")
        tags = ["astronomy", "nasa", "apod"]
        if media_type:
            tags.append(media_type)

        urls = [APOD_PAGE_URL]
        if entry.get("url"):
            urls.append(entry["url"])

        metadata = {
            key: str(entry[key]).strip()
            for key in ("title", "date", "media_type", "copyright")
            if entry.get(key)
        }

        return RawRecord(
            content=content,
            source=self.name,
            category="Space",
            tags=tags,
            urls=urls,
            metadata=metadata,
        )

    async def health_check(self) -> bool:
        """Check if the APOD API is accessible.

        Returns:
            True if API responds successfully
        """
        try:
            response = await self._http_client.get(
                self._config.api_url,
                params={"api_key": self._config.api_key},
                timeout=self._config.request_timeout,
            )
            return response.status_code == 200
        except Exception as e:
            logger.warning("NASA APOD health check failed", error=str(e))
            return False


__all__ = ["NasaApodSource"]
