"""Listing record models for extraction and JSON output."""

from pydantic import BaseModel, Field

from listing_scraper.urls import parse_key


class ListingRecord(BaseModel):
    """One sighting of a listing anchor on a listing page."""

    url: str = Field(description="Absolute canonical URL, the identity key")
    title: str | None = Field(default=None, description="Best short text line")
    description: str | None = Field(default=None, description="Address or secondary line")
    image: str | None = Field(default=None, description="Absolute preview image URL")


class CanonicalRecord(BaseModel):
    """Output record, one per unique location."""

    url: str = Field(description="Absolute canonical URL")
    key: str | None = Field(default=None, description="Path segment '<id>-<slug>'")
    id: str | None = Field(default=None, description="Five-digit location id")
    slug: str | None = Field(default=None, description="Slug after the id")
    title: str = Field(description="Listing title, falls back to key then url")
    description: str | None = Field(default=None)
    image: str | None = Field(default=None)
    canonical: str = Field(description="Stable external reference, same as url")

    @classmethod
    def from_listing(cls, record: ListingRecord) -> "CanonicalRecord":
        """Build the output record from a merged sighting."""
        key = parse_key(record.url)
        return cls(
            url=record.url,
            key=key.key,
            id=key.id,
            slug=key.slug,
            title=record.title or key.key or record.url,
            description=record.description or None,
            image=record.image or None,
            canonical=record.url,
        )
