"""Authentication and authorization module."""

from app.auth.permissions import (
    BlogDeleterDep,
    BlogEditorDep,
    BlogWriterDep,
    OwnPostsDep,
    ProfileEditorDep,
    ProfileReaderDep,
    UsersDeleteDep,
    UsersListDep,
    UsersReadDep,
    UsersUpdateDep,
    require_operation,
)

__all__ = [
    "BlogDeleterDep",
    "BlogEditorDep",
    "BlogWriterDep",
    "OwnPostsDep",
    "ProfileEditorDep",
    "ProfileReaderDep",
    "UsersDeleteDep",
    "UsersListDep",
    "UsersReadDep",
    "UsersUpdateDep",
    "require_operation",
]
