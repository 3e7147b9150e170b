# app/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, services and the caller's identity."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import settings
from app.db import get_session
from app.errors.auth import MissingTokenError
from app.managers.token_manager import decode_access_token
from app.rabc import Principal
from app.repositories import BlogFilters, BlogRepository, UserRepository
from app.schemas.enums import BlogStatus, Subcategory
from app.services import AuthService, BlogService, MediaService, UserAdminService
from app.services.storage import ImageHost, get_storage_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_optional_principal(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> Principal | None:
    """
    Resolve the caller from an optional bearer token.

    Parameters
    ----------
    token : str | None
        Bearer token, if the request carried one.

    Returns
    -------
    Principal | None
        The caller, or None for anonymous requests.

    Raises
    ------
    InvalidTokenError
        If a token was sent but does not verify.
    """
    if not token:
        return None
    return Principal.from_claims(decode_access_token(token))


def get_current_principal(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    """
    Resolve the authenticated caller from the bearer token claims.

    Parameters
    ----------
    principal : Principal | None
        Caller resolved from the optional token.

    Returns
    -------
    Principal
        The authenticated caller.

    Raises
    ------
    MissingTokenError
        If no bearer token was sent.
    """
    if principal is None:
        raise MissingTokenError
    return principal


OptionalPrincipalDep = Annotated[Principal | None, Depends(get_optional_principal)]
PrincipalDep = Annotated[Principal, Depends(get_current_principal)]


def get_user_repository(session: SessionDep) -> UserRepository:
    """
    Resolve the `UserRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    UserRepository
        Repository instance bound to the session.
    """
    return UserRepository(session)


def get_blog_repository(session: SessionDep) -> BlogRepository:
    """
    Resolve the `BlogRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    BlogRepository
        Repository instance bound to the session.
    """
    return BlogRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]


@lru_cache(maxsize=1)
def get_image_host() -> ImageHost:
    """Return the configured image host, created once per process."""
    return get_storage_service()


def get_media_service(host: Annotated[ImageHost, Depends(get_image_host)]) -> MediaService:
    return MediaService(host)


def get_auth_service(repo: UserRepoDep) -> AuthService:
    return AuthService(repo)


def get_user_admin_service(repo: UserRepoDep) -> UserAdminService:
    return UserAdminService(repo)


def get_blog_service(
    repo: BlogRepoDep,
    media: Annotated[MediaService, Depends(get_media_service)],
) -> BlogService:
    return BlogService(repo, media)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserAdminServiceDep = Annotated[UserAdminService, Depends(get_user_admin_service)]
BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]


@dataclass(frozen=True)
class BlogListQuery:
    """
    Query container for blog listing and filters.

    Parameters
    ----------
    filters : BlogFilters
        Equality filters on category, subcategory and status.
    skip : int
        Number of records to skip.
    limit : int
        Maximum number of records to return.
    """

    filters: BlogFilters
    skip: int
    limit: int


def _blog_list_query(default_limit: int):
    def get_blog_list_query(
        category: Annotated[str | None, Query(description="Category filter")] = None,
        subcategory: Annotated[Subcategory | None, Query(description="Subcategory filter")] = None,
        status: Annotated[BlogStatus | None, Query(description="Status filter")] = None,
        skip: Annotated[int, Query(ge=0, description="Number of records to skip")] = 0,
        limit: Annotated[
            int,
            Query(ge=1, le=100, description="Maximum number of records to return"),
        ] = default_limit,
    ) -> BlogListQuery:
        """
        Dependency to construct `BlogListQuery` from query parameters.

        Returns
        -------
        BlogListQuery
            Aggregated query parameters object.
        """
        return BlogListQuery(
            filters=BlogFilters(
                category=category,
                subcategory=str(subcategory) if subcategory else None,
                status=str(status) if status else None,
            ),
            skip=skip,
            limit=limit,
        )

    return get_blog_list_query


BlogQueryListDep = Annotated[BlogListQuery, Depends(_blog_list_query(settings.BLOG_LIST_LIMIT))]
MyPostsQueryDep = Annotated[BlogListQuery, Depends(_blog_list_query(settings.MY_POSTS_LIMIT))]
