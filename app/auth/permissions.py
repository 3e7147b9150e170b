"""FastAPI dependencies enforcing the role-based access control gate."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends

from app.dependencies.dependencies import get_current_principal
from app.rabc import Operation, Principal, authorize, enforce


def require_operation(operation: Operation) -> Callable[..., Principal]:
    """
    Create a dependency that requires the caller's role to allow an operation.

    Args:
        operation: Operation the route performs

    Returns:
        Callable: Dependency function

    Example:
        @router.get("/users")
        async def list_users(actor: Annotated[Principal, Depends(require_operation(Operation.USERS_LIST))]):
            ...
    """

    def operation_checker(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        enforce(authorize(principal.role, operation))
        return principal

    return operation_checker


# Type aliases for common dependencies
UsersListDep = Annotated[Principal, Depends(require_operation(Operation.USERS_LIST))]
UsersReadDep = Annotated[Principal, Depends(require_operation(Operation.USERS_READ))]
UsersUpdateDep = Annotated[Principal, Depends(require_operation(Operation.USERS_UPDATE))]
UsersDeleteDep = Annotated[Principal, Depends(require_operation(Operation.USERS_DELETE))]
BlogWriterDep = Annotated[Principal, Depends(require_operation(Operation.BLOGS_CREATE))]
BlogEditorDep = Annotated[Principal, Depends(require_operation(Operation.BLOGS_UPDATE))]
BlogDeleterDep = Annotated[Principal, Depends(require_operation(Operation.BLOGS_DELETE))]
OwnPostsDep = Annotated[Principal, Depends(require_operation(Operation.BLOGS_LIST_OWN))]
ProfileReaderDep = Annotated[Principal, Depends(require_operation(Operation.PROFILE_READ))]
ProfileEditorDep = Annotated[Principal, Depends(require_operation(Operation.PROFILE_UPDATE))]
