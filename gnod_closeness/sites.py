"""Site configuration for the Gnod map family.

All Gnod map sites share one page convention: the related items are
``<a class="S">`` anchors and the similarity arrays live in the third inline
``<script>`` block. SiteConfig keeps those layout assumptions in one place
so that a layout change is a configuration edit, not a code change.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SiteConfig(BaseModel):
    """Layout assumptions and base URL for one Gnod map site.

    Attributes:
        name: Short site name used by :func:`get_site`.
        base_url: Page URL prefix; the subject slug is appended to it.
        anchor_selector: CSS selector for the suggestion anchors.
        script_index: Zero-based index of the ``<script>`` element holding
            the similarity arrays.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    base_url: str
    anchor_selector: str = "a.S"
    script_index: int = Field(default=2, ge=0)

    def page_url(self, subject_ref: str | None = None) -> str:
        """URL of the subject's map page, or the site root if None."""
        if subject_ref is None:
            return self.base_url
        return f"{self.base_url}{subject_ref}"


MUSIC_MAP = SiteConfig(name="music", base_url="https://www.music-map.com/")
LITERATURE_MAP = SiteConfig(
    name="literature", base_url="https://www.literature-map.com/"
)
MOVIE_MAP = SiteConfig(name="movie", base_url="https://www.movie-map.com/")

DEFAULT_SITE = MUSIC_MAP

SITES: dict[str, SiteConfig] = {
    site.name: site for site in (MUSIC_MAP, LITERATURE_MAP, MOVIE_MAP)
}


def get_site(name: str) -> SiteConfig:
    """Look up a preset by name.

    Raises:
        KeyError: If no preset has that name.
    """
    try:
        return SITES[name]
    except KeyError:
        known = ", ".join(sorted(SITES))
        raise KeyError(
            f"Unknown site '{name}'. Known sites: {known}"
        ) from None
