"""Keyword lookup."""

from __future__ import annotations

from crate_metadata.query.lookup import CrateLookup


def keywords_for(lookup: CrateLookup, crate_id: str) -> set[str]:
    """Return the keywords tagged on a package; empty when it has none."""
    return set(lookup.keywords(crate_id))


__all__ = ["keywords_for"]
