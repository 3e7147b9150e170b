# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    AuthServiceDep,
    BlogListQuery,
    BlogQueryListDep,
    BlogRepoDep,
    BlogServiceDep,
    MyPostsQueryDep,
    OptionalPrincipalDep,
    PrincipalDep,
    SessionDep,
    UserAdminServiceDep,
    UserRepoDep,
    get_current_principal,
    get_image_host,
    get_optional_principal,
)

__all__ = [
    "AuthServiceDep",
    "BlogListQuery",
    "BlogQueryListDep",
    "BlogRepoDep",
    "BlogServiceDep",
    "MyPostsQueryDep",
    "OptionalPrincipalDep",
    "PrincipalDep",
    "SessionDep",
    "UserAdminServiceDep",
    "UserRepoDep",
    "get_current_principal",
    "get_image_host",
    "get_optional_principal",
]
