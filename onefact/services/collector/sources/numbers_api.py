"""Numbers API source.

Collects random number facts from numbersapi.com.
http://numbersapi.com/
"""

from typing import Any

from onefact.config.sources import NumbersApiConfig
from onefact.core.exceptions import SourceFetchError
from onefact.core.logging import get_logger
from onefact.services.collector.base import BaseSource, RawRecord

logger = get_logger(__name__)


class NumbersApiSource(BaseSource[NumbersApiConfig]):
    """Numbers API source.

    Requests one random fact per configured type. A failed type is skipped;
    the source fails only when every type fails.
    """

    name = "numbers_api"

    @classmethod
    def build_config(cls, overrides: dict[str, Any]) -> NumbersApiConfig:
        """Build NumbersApiConfig from overrides.

        Args:
            overrides: Configuration overrides (any NumbersApiConfig field)

        Returns:
            NumbersApiConfig instance
        """
        return NumbersApiConfig(**overrides)

    async def get_facts(self) -> list[RawRecord]:
        """Collect one random fact per type.

        Returns:
            List of RawRecord in type order

        Raises:
            SourceFetchError: If every request failed
        """
        logger.info("Collecting from Numbers API", types=self._config.fact_types)

        records: list[RawRecord] = []
        failures: list[SourceFetchError] = []
        for fact_type in self._config.fact_types:
            try:
                data = await self._fetch_json(
                    f"{self._config.api_url.rstrip('/')}/random/{fact_type}",
                    params={"json": ""},
                )
            except SourceFetchError as e:
                logger.warning("Failed to fetch number fact", fact_type=fact_type, error=str(e))
                failures.append(e)
                continue

            record = self._to_raw_record(data, fact_type)
            if record:
                records.append(record)

        if failures and len(failures) == len(self._config.fact_types):
            raise failures[-1]

        logger.info("Numbers API collection complete", collected=len(records))
        return records

    def _to_raw_record(self, data: Any, fact_type: str) -> RawRecord | None:
        """Convert a Numbers API response to RawRecord.

        Args:
            data: Response JSON
            fact_type: Requested fact type

        Returns:
            RawRecord or None if the text is unusable
        """
        if not isinstance(data, dict):
            return None
        content = self.clean_extract(data.get("text"))
        if content is None:
            return None

        category = data.get("type") or fact_type
        metadata = {"type": str(category)}
        if data.get("number") is not None:
            metadata["number"] = str(data["number"])
        if data.get("found") is not None:
            metadata["found"] = str(data["found"]).lower()

        return RawRecord(
            content=content,
            source=self.name,
            category=str(category),
            tags=["numbers", str(category)],
            metadata=metadata,
        )

    async def health_check(self) -> bool:
        """Check if the Numbers API is accessible.

        Returns:
            True if API responds successfully
        """
        try:
            response = await self._http_client.get(
                f"{self._config.api_url.rstrip('/')}/42",
                timeout=self._config.request_timeout,
            )
            return response.status_code == 200
        except Exception as e:
            logger.warning("Numbers API health check failed", error=str(e))
            return False


__all__ = ["NumbersApiSource"]
