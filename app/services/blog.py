"""
Blog service.

Orchestrates slug allocation, cover image handling and persistence for
blog posts. Slugs come from ``generate_slug`` and are made unique by
``BlogRepository.find_unique_slug``; the unique index on ``blogs.slug``
settles any race between concurrent writers.
"""

from uuid import UUID

from fastapi import UploadFile

from app.configs.settings import settings
from app.errors.base import BaseAppError
from app.errors.database import RecordNotFoundError
from app.errors.validation import ValidationError
from app.models import BlogDB
from app.monitoring import get_logger
from app.repositories.blog import BlogFilters, BlogRepository
from app.schemas.blog import BlogCreate, BlogUpdate
from app.services.media import MediaService
from app.services.storage import UploadedImage
from app.utils.slug import generate_slug

logger = get_logger(__name__)

BLOG_NOT_FOUND_MESSAGE = "Blog not found"
EMPTY_SLUG_MESSAGE = "Could not generate a valid slug from title"


def base_slug_for(text: str) -> str:
    """
    Normalise text into a base slug.

    Raises:
        ValidationError: If nothing URL-safe is left after normalisation
    """
    base = generate_slug(text)
    if not base:
        raise ValidationError(
            detail=EMPTY_SLUG_MESSAGE,
            errors=[{"field": "slug", "message": EMPTY_SLUG_MESSAGE, "type": "value_error"}],
        )
    return base


class BlogService:
    """Service for creating, reading, updating and deleting blog posts."""

    def __init__(self, blog_repo: BlogRepository, media: MediaService) -> None:
        """
        Initialize the blog service.

        Args:
            blog_repo: Blog repository for database operations
            media: Media service for cover images
        """
        self.blog_repo = blog_repo
        self.media = media

    async def list_blogs(
        self,
        filters: BlogFilters,
        skip: int = 0,
        limit: int = settings.BLOG_LIST_LIMIT,
    ) -> tuple[list[BlogDB], bool]:
        """
        Get one page of blogs, newest first.

        One extra row is fetched to learn whether another page exists.

        Returns:
            tuple[list[BlogDB], bool]: The page and whether more blogs follow
        """
        blogs = await self.blog_repo.list_blogs(filters, skip=skip, limit=limit + 1)
        return blogs[:limit], len(blogs) > limit

    async def list_for_author(
        self,
        author: str,
        filters: BlogFilters,
        skip: int = 0,
        limit: int = settings.MY_POSTS_LIMIT,
    ) -> tuple[list[BlogDB], int]:
        """
        Get blogs whose author is ``author``.

        Returns:
            tuple[list[BlogDB], int]: The page and the number of matching blogs
        """
        own = BlogFilters(
            category=filters.category,
            subcategory=filters.subcategory,
            status=filters.status,
            author=author,
        )
        blogs = await self.blog_repo.list_blogs(own, skip=skip, limit=limit)
        total = await self.blog_repo.count_blogs(own)
        return blogs, total

    async def get_blog(self, blog_id: UUID) -> BlogDB:
        """
        Get a blog by id.

        Raises:
            RecordNotFoundError: If no blog has this id
        """
        return await self.blog_repo.get_or_raise(blog_id, BLOG_NOT_FOUND_MESSAGE)

    async def get_by_slug(self, slug: str) -> BlogDB:
        """
        Get a blog by slug.

        Raises:
            RecordNotFoundError: If no blog has this slug
        """
        blog = await self.blog_repo.get_by_slug(slug)
        if not blog:
            raise RecordNotFoundError(detail=BLOG_NOT_FOUND_MESSAGE)
        return blog

    async def create_blog(self, payload: BlogCreate, image: UploadFile | None = None) -> BlogDB:
        """
        Create a blog under a freshly allocated slug.

        The slug is derived from the explicit ``slug`` when given, otherwise
        from the title.

        Args:
            payload: Validated creation form
            image: Optional cover image

        Returns:
            BlogDB: Created blog

        Raises:
            ValidationError: If no slug can be derived
            DuplicateEntryError: If a concurrent writer took the slug first
            UploadError: If the cover image is rejected or cannot be stored
        """
        base = base_slug_for(payload.slug or payload.title)
        slug = await self.blog_repo.find_unique_slug(base)

        uploaded = await self._upload(image)
        try:
            blog = await self.blog_repo.create_blog(
                payload,
                slug=slug,
                image=uploaded.url if uploaded else None,
                image_public_id=uploaded.public_id if uploaded else None,
            )
        except BaseAppError:
            if uploaded:
                await self.media.release(uploaded.public_id)
            raise

        logger.info(f"Created blog {blog.id} with slug '{blog.slug}'")
        return blog

    async def update_blog(
        self,
        blog_id: UUID,
        payload: BlogUpdate,
        image: UploadFile | None = None,
    ) -> BlogDB:
        """
        Apply a partial update to a blog.

        A new ``slug`` (or, failing that, a new ``title``) re-derives the
        slug; an unchanged base keeps the current slug. A new image replaces
        the old one, which is then deleted from the host best-effort.

        Args:
            blog_id: Blog to update
            payload: Partial update form
            image: Optional replacement cover image

        Returns:
            BlogDB: Updated blog

        Raises:
            RecordNotFoundError: If no blog has this id
            ValidationError: If no slug can be derived
            DuplicateEntryError: If a concurrent writer took the slug first
        """
        blog = await self.get_blog(blog_id)
        values = {key: str(value) for key, value in payload.changes().items()}

        source = payload.slug or payload.title
        if source is not None:
            base = base_slug_for(source)
            if base != blog.slug:
                values["slug"] = await self.blog_repo.find_unique_slug(base, exclude_id=blog.id)

        old_public_id = blog.image_public_id
        uploaded = await self._upload(image)
        if uploaded:
            values["image"] = uploaded.url
            values["image_public_id"] = uploaded.public_id

        try:
            blog = await self.blog_repo.update(blog, **values)
        except BaseAppError:
            if uploaded:
                await self.media.release(uploaded.public_id)
            raise

        if uploaded and old_public_id and old_public_id != uploaded.public_id:
            await self.media.release(old_public_id)

        logger.info(f"Updated blog {blog.id}: {sorted(values)}")
        return blog

    async def delete_blog(self, blog_id: UUID) -> None:
        """
        Delete a blog and, best-effort, its hosted image.

        Raises:
            RecordNotFoundError: If no blog has this id
        """
        blog = await self.get_blog(blog_id)
        await self.media.release(blog.image_public_id)
        await self.blog_repo.delete(blog)
        logger.info(f"Deleted blog {blog_id}")

    async def _upload(self, image: UploadFile | None) -> UploadedImage | None:
        if image is None or not image.filename:
            return None
        return await self.media.upload_blog_image(image)
