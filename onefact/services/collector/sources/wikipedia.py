"""Wikipedia source.

Crawls configured categories through the MediaWiki action API and turns
the intro extract of member pages into fact candidates.
https://www.mediawiki.org/wiki/API:Categorymembers
"""

from typing import Any
from urllib.parse import quote

from onefact.config.sources import WikipediaConfig
from onefact.core.exceptions import SourceFetchError
from onefact.core.logging import get_logger
from onefact.services.collector.base import BaseSource, RawRecord

logger = get_logger(__name__)


class WikipediaSource(BaseSource[WikipediaConfig]):
    """Wikipedia category crawler.

    For each configured category, lists member pages and fetches the plain
    text intro extract plus page categories for the first
    ``pages_per_category`` members.

    Config options:
        categories: Categories to crawl
        members_limit: Members listed per category (default: 50)
        pages_per_category: Pages fetched per category (default: 3)
    """

    name = "wikipedia"

    @classmethod
    def build_config(cls, overrides: dict[str, Any]) -> WikipediaConfig:
        """Build WikipediaConfig from overrides.

        Args:
            overrides: Configuration overrides (any WikipediaConfig field)

        Returns:
            WikipediaConfig instance
        """
        return WikipediaConfig(**overrides)

    async def get_facts(self) -> list[RawRecord]:
        """Collect intro extracts from category member pages.

        A category whose listing fails is skipped. The source fails only
        when no category listing succeeds.

        Returns:
            List of RawRecord in crawl order

        Raises:
            SourceFetchError: If every category listing failed
        """
        logger.info(
            "Collecting from Wikipedia",
            categories=len(self._config.categories),
            pages_per_category=self._config.pages_per_category,
        )

        records: list[RawRecord] = []
        listed = 0
        last_error: SourceFetchError | None = None

        for category in self._config.categories:
            try:
                titles = await self._list_members(category)
            except SourceFetchError as e:
                logger.warning("Failed to list Wikipedia category", category=category, error=str(e))
                last_error = e
                continue

            listed += 1
            for title in titles[: self._config.pages_per_category]:
                record = await self._fetch_page(title, category)
                if record:
                    records.append(record)

        if self._config.categories and listed == 0 and last_error is not None:
            raise last_error

        logger.info("Wikipedia collection complete", collected=len(records))
        return records

    async def _list_members(self, category: str) -> list[str]:
        """List article titles in a category.

        Args:
            category: Category name without prefix

        Returns:
            Member page titles
        """
        data = await self._fetch_json(
            self._config.api_url,
            params={
                "action": "query",
                "format": "json",
                "list": "categorymembers",
                "cmtitle": f"Category:{category}",
                "cmlimit": self._config.members_limit,
                "cmnamespace": 0,
            },
        )
        if not isinstance(data, dict):
            return []
        members = data.get("query", {}).get("categorymembers", [])
        return [m["title"] for m in members if m.get("title")]

    async def _fetch_page(self, title: str, category: str) -> RawRecord | None:
        """Fetch one page extract.

        Args:
            title: Page title
            category: Crawled category, used as the record category

        Returns:
            RawRecord or None if the fetch failed or the extract was unusable
        """
        try:
            data = await self._fetch_json(
                self._config.api_url,
                params={
                    "action": "query",
                    "format": "json",
                    "prop": "extracts|categories",
                    "exintro": 1,
                    "explaintext": 1,
                    "clshow": "!hidden",
                    "titles": title,
                },
            )
        except SourceFetchError as e:
            logger.warning("Failed to fetch Wikipedia page", title=title, error=str(e))
            return None

        pages = data.get("query", {}).get("pages", {}) if isinstance(data, dict) else {}
        for page_id, page in pages.items():
            content = self.clean_extract(page.get("extract"))
            if content is None:
                continue

            page_title = page.get("title", title)
            tags = [
                c["title"].removeprefix("Category:").strip()
                for c in page.get("categories", [])
                if c.get("title")
            ]
            return RawRecord(
                content=content,
                source=self.name,
                category=category,
                tags=[t for t in tags if t],
                urls=[self._article_url(page_title)],
                metadata={
                    "title": page_title,
                    "page_id": str(page_id),
                    "language": self._config.language,
                },
            )
        return None

    def _article_url(self, title: str) -> str:
        """Build the canonical article URL for a title."""
        slug = quote(title.replace(" ", "_"), safe="_()',-.:")
        return f"https://{self._config.language}.wikipedia.org/wiki/{slug}"

    async def health_check(self) -> bool:
        """Check if the MediaWiki API is accessible.

        Returns:
            True if API responds successfully
        """
        try:
            response = await self._http_client.get(
                self._config.api_url,
                params={"action": "query", "meta": "siteinfo", "format": "json"},
                timeout=self._config.request_timeout,
            )
            return response.status_code == 200
        except Exception as e:
            logger.warning("Wikipedia health check failed", error=str(e))
            return False


__all__ = ["WikipediaSource"]
