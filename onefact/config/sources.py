"""Source collector configuration models.

Defines default settings and configuration for each source type.
"""

from pydantic import BaseModel, Field

WIKIPEDIA_DEFAULT_CATEGORIES = [
    "Science",
    "Technology",
    "History",
    "Geography",
    "Arts",
    "Culture",
    "Sports",
    "Entertainment",
    "Politics",
    "Business",
    "Education",
    "Health",
    "Environment",
]


class WikipediaConfig(BaseModel):
    """Wikipedia source configuration.

    Attributes:
        api_url: MediaWiki action API endpoint
        categories: Categories to crawl for member pages
        members_limit: Category members listed per category
        pages_per_category: Pages fetched per category
        language: Wikipedia language edition
        request_timeout: HTTP request timeout in seconds
    """

    api_url: str = Field(default="https://en.wikipedia.org/w/api.php")
    categories: list[str] = Field(default_factory=lambda: list(WIKIPEDIA_DEFAULT_CATEGORIES))
    members_limit: int = Field(default=50, ge=1, le=500)
    pages_per_category: int = Field(default=3, ge=1, le=20)
    language: str = Field(default="en")
    request_timeout: float = Field(default=10.0, ge=1.0, le=60.0)


class NasaApodConfig(BaseModel):
    """NASA Astronomy Picture of the Day source configuration.

    Attributes:
        api_url: APOD endpoint
        api_key: NASA API key (``DEMO_KEY`` is rate limited)
        count: Number of random entries to request (1 = today's entry)
        request_timeout: HTTP request timeout in seconds
    """

    api_url: str = Field(default="https://api.nasa.gov/planetary/apod")
    api_key: str = Field(default="DEMO_KEY")
    count: int = Field(default=1, ge=1, le=100)
    request_timeout: float = Field(default=10.0, ge=1.0, le=60.0)


class NumbersApiConfig(BaseModel):
    """Numbers API source configuration.

    Attributes:
        api_url: Base URL of numbersapi.com
        fact_types: Fact types to request (math, trivia, date, year)
        request_timeout: HTTP request timeout in seconds
    """

    api_url: str = Field(default="http://numbersapi.com")
    fact_types: list[str] = Field(default_factory=lambda: ["math", "trivia", "date", "year"])
    request_timeout: float = Field(default=10.0, ge=1.0, le=60.0)


class UselessFactsConfig(BaseModel):
    """Useless Facts API source configuration.

    Attributes:
        api_url: Random fact endpoint
        language: Fact language
        limit: Number of random facts requested per pass
        request_timeout: HTTP request timeout in seconds
    """

    api_url: str = Field(default="https://uselessfacts.jsph.pl/api/v2/facts/random")
    language: str = Field(default="en")
    limit: int = Field(default=3, ge=1, le=20)
    request_timeout: float = Field(default=10.0, ge=1.0, le=60.0)


class TodayInHistoryConfig(BaseModel):
    """Today in History (muffinlabs) source configuration.

    Attributes:
        api_url: Base URL of the history API
        limit: Maximum events kept per pass
        request_timeout: HTTP request timeout in seconds
    """

    api_url: str = Field(default="https://history.muffinlabs.com/date")
    limit: int = Field(default=5, ge=1, le=50)
    request_timeout: float = Field(default=10.0, ge=1.0, le=60.0)


__all__ = [
    "WIKIPEDIA_DEFAULT_CATEGORIES",
    "WikipediaConfig",
    "NasaApodConfig",
    "NumbersApiConfig",
    "UselessFactsConfig",
    "TodayInHistoryConfig",
]
