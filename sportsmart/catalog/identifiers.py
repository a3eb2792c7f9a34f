"""Identifier helpers for catalog filters.

Storefront URLs name categories and brands either by slug
(``?category=cricket,football``) or by id. The resolver turns either
form into internal ids for the filter builder.
"""

import re
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_INT_ID = re.compile(r"\d+", re.ASCII)


def is_uuid(value: str | None) -> bool:
    """Check whether a value has the 8-4-4-4-12 hex shape of a UUID."""
    return bool(value) and UUID_PATTERN.match(value) is not None


def split_tokens(raw: str | None) -> list[str]:
    """Split a comma-separated query value, dropping empty tokens.

    Args:
        raw: Raw query parameter value.

    Returns:
        Stripped, non-empty tokens in their original order.
    """
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


def parse_int_ids(raw: str | None) -> list[int]:
    """Parse a comma-separated list of integer ids.

    Non-numeric tokens are dropped rather than rejected.
    """
    return [int(token) for token in split_tokens(raw) if _INT_ID.fullmatch(token)]


def slugify(text: str) -> str:
    """Derive a kebab-case slug from a display name.

    >>> slugify("SG Cobra Xtreme (English Willow)")
    'sg-cobra-xtreme-english-willow'
    """
    return _NON_SLUG_CHARS.sub("-", text.lower()).strip("-")


class IdentifierResolver:
    """Resolves slug-or-id filter values into internal ids.

    Only the first token decides whether the whole list is treated as
    ids or as slugs. In the id branch, tokens that aren't UUID-shaped
    are dropped; in the slug branch, slugs without a match are dropped.
    Either way the result may be empty, which is not an error.

    Example usage:
        resolver = IdentifierResolver(session)
        category_ids = await resolver.resolve(Category, "cricket,football")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize resolver with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def resolve(self, model: Any, raw: str | None) -> list[str]:
        """Resolve a raw comma-separated value into ids.

        Args:
            model: Mapped class with ``id`` and ``slug`` columns.
            raw: Raw query parameter value.

        Returns:
            Resolved ids, possibly empty.
        """
        tokens = split_tokens(raw)
        if not tokens:
            return []

        if is_uuid(tokens[0]):
            return [token.lower() for token in tokens if is_uuid(token)]

        result = await self.session.execute(
            select(model.id).where(model.slug.in_(tokens))
        )
        ids = [str(row_id) for row_id in result.scalars().all()]

        if len(ids) < len(tokens):
            logger.debug(
                "Unresolved slugs dropped from filter",
                table=model.__tablename__,
                requested=tokens,
                resolved=len(ids),
            )
        return ids
