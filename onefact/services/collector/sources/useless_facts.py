"""Useless Facts source.

Collects random trivia from uselessfacts.jsph.pl.
https://uselessfacts.jsph.pl/
"""

from typing import Any

from onefact.config.sources import UselessFactsConfig
from onefact.core.exceptions import SourceFetchError
from onefact.core.logging import get_logger
from onefact.services.collector.base import BaseSource, RawRecord

logger = get_logger(__name__)


class UselessFactsSource(BaseSource[UselessFactsConfig]):
    """Random trivia source.

    Requests ``limit`` random facts. Repeated facts within one pass are
    dropped by upstream id.
    """

    name = "useless_facts"

    @classmethod
    def build_config(cls, overrides: dict[str, Any]) -> UselessFactsConfig:
        """Build UselessFactsConfig from overrides.

        Args:
            overrides: Configuration overrides (any UselessFactsConfig field)

        Returns:
            UselessFactsConfig instance
        """
        return UselessFactsConfig(**overrides)

    async def get_facts(self) -> list[RawRecord]:
        """Collect random facts.

        The first request is the primary request: its failure fails the
        source. Later failures are logged and skipped.

        Returns:
            List of RawRecord

        Raises:
            SourceFetchError: If the first request fails
        """
        logger.info("Collecting from Useless Facts", limit=self._config.limit)

        records: list[RawRecord] = []
        seen_ids: set[str] = set()
        for attempt in range(self._config.limit):
            try:
                data = await self._fetch_json(
                    self._config.api_url, params={"language": self._config.language}
                )
            except SourceFetchError as e:
                if attempt == 0:
                    raise
                logger.warning("Failed to fetch useless fact", attempt=attempt, error=str(e))
                continue

            record = self._to_raw_record(data)
            if record is None:
                continue
            fact_id = record.metadata.get("id", "")
            if fact_id and fact_id in seen_ids:
                continue
            seen_ids.add(fact_id)
            records.append(record)

        logger.info("Useless Facts collection complete", collected=len(records))
        return records

    def _to_raw_record(self, data: Any) -> RawRecord | None:
        """Convert an API response to RawRecord.

        Args:
            data: Response JSON

        Returns:
            RawRecord or None if the text is unusable
        """
        if not isinstance(data, dict):
            return None
        content = self.clean_extract(data.get("text"))
        if content is None:
            return None

        metadata = {"language": str(data.get("language") or self._config.language)}
        if data.get("id"):
            metadata["id"] = str(data["id"])
        if data.get("source"):
            metadata["source"] = str(data["source"])

        urls = [data["source_url"]] if data.get("source_url") else []
        if data.get("permalink"):
            urls.append(data["permalink"])

        return RawRecord(
            content=content,
            source=self.name,
            category="Fun Facts",
            tags=["trivia"],
            urls=urls,
            metadata=metadata,
        )

    async def health_check(self) -> bool:
        """Check if the Useless Facts API is accessible.

        Returns:
            True if API responds successfully
        """
        try:
            response = await self._http_client.get(
                self._config.api_url,
                params={"language": self._config.language},
                timeout=self._config.request_timeout,
            )
            return response.status_code == 200
        except Exception as e:
            logger.warning("Useless Facts health check failed", error=str(e))
            return False


__all__ = ["UselessFactsSource"]
