from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, status


@dataclass(eq=False)
class BoardException(Exception):
    message: str
    code: str = "error"
    details: dict | None = None

    def __str__(self) -> str:
        return self.message


class NotFoundError(BoardException):
    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message=message, code="not_found", details=details)


class EntityNotFoundError(NotFoundError):
    """Raised when a lookup by identifier required by an operation finds nothing."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} with id {entity_id} not found", details={"id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


class DatabaseError(BoardException):
    def __init__(self, message: str = "Database failure", details: dict | None = None) -> None:
        super().__init__(message=message, code="database_error", details=details)


EXC_TO_STATUS: dict[type[BoardException], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DatabaseError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def map_exception_to_http(exc: BoardException) -> HTTPException:
    status_code = status.HTTP_400_BAD_REQUEST
    for typ, st in EXC_TO_STATUS.items():
        if isinstance(exc, typ):
            status_code = st
            break

    return HTTPException(status_code=status_code, detail=exc.message)
