"""Source model."""

from typing import Literal

from pydantic import BaseModel


class Source(BaseModel):
    """A citation discovered during generation. Web sources are keyed by URL."""

    id: str
    sourceType: Literal["url"] = "url"
    url: str | None = None
    title: str | None = None

    @classmethod
    def from_url(cls, url: str, title: str | None = None) -> "Source":
        return cls(id=url, url=url, title=title)
