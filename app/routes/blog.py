# app/routes/blog.py

"""
Blog Routes.

Provides CRUD endpoints and listings for blogs under ``/api/blogs``.

Summary
-------
Endpoints include:
  - List blogs (with filters)
  - Ping
  - List the caller's own posts
  - Get blog by slug
  - Get blog by id
  - Create blog
  - Update blog
  - Delete blog

Forms
-----
Create and update accept ``multipart/form-data`` so the admin panel can send
the cover image in the same request as the text fields.

Authorization
-------------
Reads are public. Writes and the "my posts" listing require a bearer token of
any role; there is no per-post ownership check.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.status import HTTP_201_CREATED

from app.auth import BlogDeleterDep, BlogEditorDep, BlogWriterDep, OwnPostsDep
from app.configs import SLUG_CONFLICT_MESSAGE
from app.dependencies import BlogQueryListDep, BlogServiceDep, MyPostsQueryDep
from app.schemas.auth import MessageResponse
from app.schemas.blog import (
    BlogCreate,
    BlogListResponse,
    BlogMessageResponse,
    BlogResponse,
    BlogUpdate,
    MyBlogsResponse,
)

router = APIRouter(prefix="/api/blogs", tags=["📝 Blogs"])

BLOG_EXAMPLE = {
    "id": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
    "title": "Getting Started with FastAPI",
    "slug": "getting-started-with-fastapi",
    "content": "<p>FastAPI is a modern web framework...</p>",
    "category": "Development",
    "subcategory": "Tutorial",
    "author": "jane_doe",
    "status": "Featured",
    "image": "https://res.cloudinary.com/demo/image/upload/v1/blog-images/1735718400000-cover.png",
    "imagePublicId": "blog-images/1735718400000-cover",
    "createdAt": "2025-01-01T08:00:00Z",
    "updatedAt": "2025-01-01T08:00:00Z",
}

NOT_FOUND_RESPONSE = {
    "description": "Not Found",
    "content": {"application/json": {"example": {"detail": "Blog not found"}}},
}

NO_TOKEN_RESPONSE = {
    "description": "Unauthorized",
    "content": {"application/json": {"example": {"detail": "Access Denied: No token provided"}}},
}

CONFLICT_RESPONSE = {
    "description": "Conflict",
    "content": {"application/json": {"example": {"detail": SLUG_CONFLICT_MESSAGE}}},
}


def _form_errors(exc: PydanticValidationError) -> RequestValidationError:
    return RequestValidationError(
        [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()],
    )


def blog_create_form(
    title: Annotated[str, Form()],
    content: Annotated[str, Form()],
    category: Annotated[str, Form()],
    subcategory: Annotated[str, Form()],
    author: Annotated[str, Form()],
    status: Annotated[str | None, Form()] = None,
    slug: Annotated[str | None, Form()] = None,
) -> BlogCreate:
    """
    Build a `BlogCreate` from multipart form fields.

    Raises
    ------
    RequestValidationError
        If the fields do not validate.
    """
    data = {
        "title": title,
        "content": content,
        "category": category,
        "subcategory": subcategory,
        "author": author,
        "slug": slug,
    }
    if status:
        data["status"] = status
    try:
        return BlogCreate.model_validate(data)
    except PydanticValidationError as e:
        raise _form_errors(e) from e


def blog_update_form(
    title: Annotated[str | None, Form()] = None,
    content: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    subcategory: Annotated[str | None, Form()] = None,
    author: Annotated[str | None, Form()] = None,
    status: Annotated[str | None, Form()] = None,
    slug: Annotated[str | None, Form()] = None,
) -> BlogUpdate:
    """
    Build a `BlogUpdate` from multipart form fields.

    Raises
    ------
    RequestValidationError
        If the fields do not validate.
    """
    try:
        return BlogUpdate.model_validate(
            {
                "title": title,
                "content": content,
                "category": category,
                "subcategory": subcategory,
                "author": author,
                "status": status,
                "slug": slug,
            },
        )
    except PydanticValidationError as e:
        raise _form_errors(e) from e


ImageFile = Annotated[UploadFile | None, File(description="Optional cover image")]


@router.get(
    "/",
    response_class=ORJSONResponse,
    response_model=BlogListResponse,
    summary="List blogs",
    description="Newest first, filtered by category, subcategory and status.",
    responses={
        200: {
            "content": {
                "application/json": {"example": {"blogs": [BLOG_EXAMPLE], "hasMore": False}},
            },
        },
    },
    operation_id="blogs_list",
)
async def list_blogs(query: BlogQueryListDep, service: BlogServiceDep) -> BlogListResponse:
    """
    List blogs.

    Parameters
    ----------
    query : BlogListQuery
        Filters and pagination.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogListResponse
        One page of blogs and whether another follows.
    """
    blogs, has_more = await service.list_blogs(query.filters, skip=query.skip, limit=query.limit)
    return BlogListResponse(
        blogs=[BlogResponse.model_validate(blog) for blog in blogs],
        has_more=has_more,
    )


@router.get(
    "/ping",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Wake-up ping",
    responses={200: {"content": {"application/json": {"example": {"message": "Server is awake!"}}}}},
    operation_id="blogs_ping",
)
async def ping() -> MessageResponse:
    return MessageResponse(message="Server is awake!")


@router.get(
    "/my-posts",
    response_class=ORJSONResponse,
    response_model=MyBlogsResponse,
    summary="List own posts",
    description="Blogs whose author matches the caller's username.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"blogs": [BLOG_EXAMPLE], "total": 1, "author": "jane_doe"},
                },
            },
        },
        401: NO_TOKEN_RESPONSE,
    },
    operation_id="blogs_my_posts",
)
async def my_posts(
    query: MyPostsQueryDep,
    principal: OwnPostsDep,
    service: BlogServiceDep,
) -> MyBlogsResponse:
    """
    List the caller's posts.

    Parameters
    ----------
    query : BlogListQuery
        Filters and pagination.
    principal : Principal
        Authenticated caller.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    MyBlogsResponse
        The caller's posts and how many match in total.
    """
    blogs, total = await service.list_for_author(
        principal.username,
        query.filters,
        skip=query.skip,
        limit=query.limit,
    )
    return MyBlogsResponse(
        blogs=[BlogResponse.model_validate(blog) for blog in blogs],
        total=total,
        author=principal.username,
    )


@router.get(
    "/slug/{slug}",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    summary="Get blog by slug",
    responses={
        200: {"content": {"application/json": {"example": BLOG_EXAMPLE}}},
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blogs_get_by_slug",
)
async def get_blog_by_slug(slug: str, service: BlogServiceDep) -> BlogResponse:
    """
    Get a blog by slug.

    Parameters
    ----------
    slug : str
        Blog slug.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogResponse
        The blog.
    """
    return BlogResponse.model_validate(await service.get_by_slug(slug))


@router.get(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    summary="Get blog by id",
    responses={
        200: {"content": {"application/json": {"example": BLOG_EXAMPLE}}},
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blogs_get",
)
async def get_blog(blog_id: UUID, service: BlogServiceDep) -> BlogResponse:
    """
    Get a blog by id.

    Parameters
    ----------
    blog_id : UUID
        Blog id.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogResponse
        The blog.
    """
    return BlogResponse.model_validate(await service.get_blog(blog_id))


@router.post(
    "/",
    response_class=ORJSONResponse,
    response_model=BlogMessageResponse,
    status_code=HTTP_201_CREATED,
    summary="Create blog",
    description=(
        "Create a blog from multipart form fields. The slug is derived from `slug` "
        "when given, otherwise from `title`, and suffixed `-1`, `-2`, ... until unique."
    ),
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog created successfully", "blog": BLOG_EXAMPLE},
                },
            },
        },
        401: NO_TOKEN_RESPONSE,
        409: CONFLICT_RESPONSE,
    },
    operation_id="blogs_create",
)
async def create_blog(
    payload: Annotated[BlogCreate, Depends(blog_create_form)],
    principal: BlogWriterDep,
    service: BlogServiceDep,
    image: ImageFile = None,
) -> BlogMessageResponse:
    """
    Create a blog.

    Parameters
    ----------
    payload : BlogCreate
        Validated form fields.
    image : UploadFile | None
        Optional cover image.
    principal : Principal
        Authenticated caller.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogMessageResponse
        The created blog.

    Raises
    ------
    DuplicateEntryError
        If a concurrent request took the slug first.
    """
    blog = await service.create_blog(payload, image)
    return BlogMessageResponse(
        message="Blog created successfully",
        blog=BlogResponse.model_validate(blog),
    )


@router.put(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogMessageResponse,
    summary="Update blog",
    description=(
        "Partially update a blog from multipart form fields. A new image replaces "
        "the old one, which is removed from the image host."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog updated successfully", "blog": BLOG_EXAMPLE},
                },
            },
        },
        401: NO_TOKEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        409: CONFLICT_RESPONSE,
    },
    operation_id="blogs_update",
)
async def update_blog(
    blog_id: UUID,
    payload: Annotated[BlogUpdate, Depends(blog_update_form)],
    principal: BlogEditorDep,
    service: BlogServiceDep,
    image: ImageFile = None,
) -> BlogMessageResponse:
    """
    Update a blog.

    Parameters
    ----------
    blog_id : UUID
        Blog id.
    payload : BlogUpdate
        Fields to change.
    image : UploadFile | None
        Optional replacement cover image.
    principal : Principal
        Authenticated caller.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogMessageResponse
        The updated blog.
    """
    blog = await service.update_blog(blog_id, payload, image)
    return BlogMessageResponse(
        message="Blog updated successfully",
        blog=BlogResponse.model_validate(blog),
    )


@router.delete(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete blog",
    description="Delete a blog. Removing its image from the host is best-effort.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog and associated image deleted successfully"},
                },
            },
        },
        401: NO_TOKEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blogs_delete",
)
async def delete_blog(
    blog_id: UUID,
    principal: BlogDeleterDep,
    service: BlogServiceDep,
) -> MessageResponse:
    """
    Delete a blog.

    Parameters
    ----------
    blog_id : UUID
        Blog id.
    principal : Principal
        Authenticated caller.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    await service.delete_blog(blog_id)
    return MessageResponse(message="Blog and associated image deleted successfully")
