"""Pydantic schema for aggregated page metadata."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class PageMetadata(BaseModel):
    """Every single-valued metadata fact about one page."""

    # Identity
    url: str
    canonical_url: str | None = None

    # Head
    title: str | None = None
    description: str | None = None
    charset: str | None = None
    viewport: str | None = None
    language: str | None = None
    language_codes: list[str] = Field(default_factory=list)
    favicon_url: str | None = None

    # Social cards (last duplicate wins)
    open_graph: dict[str, str] = Field(default_factory=dict)
    twitter_card: dict[str, str] = Field(default_factory=dict)
    meta_tags: dict[str, str] = Field(default_factory=dict)

    # Linked resources
    icon_links: list[str] = Field(default_factory=list)
    style_sheets: list[str] = Field(default_factory=list)
    head_links: list[str] = Field(default_factory=list)
    scripts: list[str] = Field(default_factory=list)

    # Body text (None when the page has no <body>)
    body_text: str | None = None
    main_text: str | None = None

    @field_validator("url", "canonical_url", mode="before")
    @classmethod
    def strip_url(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v
