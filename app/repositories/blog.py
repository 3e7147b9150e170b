"""Blog repository for database operations."""

from dataclasses import dataclass
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import desc, func, select
from sqlalchemy.sql import Select

from app.configs import SLUG_CONFLICT_MESSAGE, settings
from app.models.blog import BlogDB
from app.monitoring import get_logger
from app.repositories.base import BaseRepository
from app.schemas.blog import BlogCreate

logger = get_logger(__name__)

FALLBACK_ATTEMPTS = 3


@dataclass(frozen=True)
class BlogFilters:
    """Optional equality filters for blog listings."""

    category: str | None = None
    subcategory: str | None = None
    status: str | None = None
    author: str | None = None


class BlogRepository(BaseRepository[BlogDB]):
    """
    Repository for Blog database operations.

    Slug uniqueness is decided here: ``find_unique_slug`` resolves a free
    candidate, and the unique index on ``blogs.slug`` rejects whichever
    writer loses a concurrent race with ``DuplicateEntryError``.
    """

    model = BlogDB
    conflict_messages: ClassVar[dict[str, str]] = {"slug": SLUG_CONFLICT_MESSAGE}

    async def create_blog(
        self,
        blog: BlogCreate,
        slug: str,
        image: str | None = None,
        image_public_id: str | None = None,
    ) -> BlogDB:
        """
        Insert a blog under an already-resolved slug.

        Args:
            blog: Validated creation form
            slug: Slug resolved by ``find_unique_slug``
            image: Hosted image URL, if any
            image_public_id: Host key for the image, if any

        Returns:
            BlogDB: Created blog

        Raises:
            DuplicateEntryError: If another writer took the slug first
        """
        db_blog = BlogDB(
            title=blog.title,
            slug=slug,
            content=blog.content,
            category=blog.category,
            subcategory=str(blog.subcategory),
            author=blog.author,
            status=str(blog.status),
            image=image,
            image_public_id=image_public_id,
        )
        return await self._add_and_refresh(db_blog)

    async def get_by_slug(self, slug: str) -> BlogDB | None:
        """
        Get blog by slug.

        Args:
            slug: Blog slug

        Returns:
            BlogDB | None: Blog if found, None otherwise
        """
        return await self.get_by_field("slug", slug)

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        """
        Check whether a slug is taken by any blog other than ``exclude_id``.

        Args:
            slug: Slug to check
            exclude_id: Blog that may keep its own slug

        Returns:
            bool: True if another blog owns the slug
        """
        return await self._check_exists_by_field("slug", slug, exclude_id)

    async def find_unique_slug(self, base_slug: str, exclude_id: UUID | None = None) -> str:
        """
        Resolve the first free slug derived from ``base_slug``.

        Tries ``base``, then ``base-1``, ``base-2`` and so on. After
        ``SLUG_MAX_ATTEMPTS`` probes a random hex suffix is used instead.

        Args:
            base_slug: Normalised slug to start from
            exclude_id: Blog being updated, allowed to keep its own slug

        Returns:
            str: A slug that no other blog owned at the time of the check
        """
        candidate = base_slug
        for counter in range(1, settings.SLUG_MAX_ATTEMPTS + 1):
            if not await self.slug_exists(candidate, exclude_id):
                return candidate
            candidate = f"{base_slug}-{counter}"

        logger.warning(
            f"Slug '{base_slug}' exhausted {settings.SLUG_MAX_ATTEMPTS} attempts, using random suffix",
        )
        for _ in range(FALLBACK_ATTEMPTS):
            candidate = f"{base_slug}-{uuid4().hex[:8]}"
            if not await self.slug_exists(candidate, exclude_id):
                break
        return candidate

    def _filtered(self, statement: Select, filters: BlogFilters) -> Select:
        if filters.category:
            statement = statement.where(BlogDB.category == filters.category)
        if filters.subcategory:
            statement = statement.where(BlogDB.subcategory == filters.subcategory)
        if filters.status:
            statement = statement.where(BlogDB.status == filters.status)
        if filters.author:
            statement = statement.where(BlogDB.author == filters.author)
        return statement

    async def list_blogs(
        self,
        filters: BlogFilters | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> list[BlogDB]:
        """
        Get blogs newest first with optional filtering.

        Args:
            filters: Optional equality filters
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            list[BlogDB]: List of blogs
        """
        statement = self._filtered(select(BlogDB), filters or BlogFilters())
        statement = (
            statement.order_by(desc(BlogDB.created_at), desc(BlogDB.id)).offset(skip).limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_blogs(self, filters: BlogFilters | None = None) -> int:
        """
        Count blogs matching the filters.

        Args:
            filters: Optional equality filters

        Returns:
            int: Number of matching blogs
        """
        statement = self._filtered(
            select(func.count()).select_from(BlogDB),
            filters or BlogFilters(),
        )
        result = await self.session.execute(statement)
        return result.scalar() or 0
