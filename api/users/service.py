"""
User business logic.

Maps repository results and storage errors onto HTTP outcomes:
- missing row -> 404
- duplicate email on create -> 409
- any other storage failure -> 500 (details stay in the server log)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status

from core import db

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        name=str(user_row["name"]),
        email=str(user_row["email"]),
        created_at=str(user_row["created_at"]),
        updated_at=str(user_row["updated_at"]),
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="User not found.",
    )


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except db.DatabaseError as exc:
        logger.exception("storage_failed operation=%s", operation)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error.",
        ) from exc


async def create_user(database: db.Database, payload: schemas.CreateUserRequest) -> schemas.UserResponse:
    with _storage_errors("create_user"):
        try:
            user_row = await repository.create_user(database, name=payload.name, email=payload.email)
        except db.UniqueViolation as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email is already registered.",
            ) from exc
    logger.info("user_created user_id=%s", user_row["id"])
    return _to_user_response(user_row)


async def list_users(database: db.Database) -> list[schemas.UserResponse]:
    with _storage_errors("list_users"):
        rows = await repository.list_users(database)
    return [_to_user_response(row) for row in rows]


async def get_user(database: db.Database, user_id: int) -> schemas.UserResponse:
    with _storage_errors("get_user"):
        user_row = await repository.get_user(database, user_id)
    if user_row is None:
        raise _not_found()
    return _to_user_response(user_row)


async def update_user(
    database: db.Database,
    user_id: int,
    payload: schemas.UpdateUserRequest,
) -> schemas.UserResponse:
    # A duplicate email here is not a create conflict; it surfaces as a 500.
    with _storage_errors("update_user"):
        user_row = await repository.update_user(database, user_id, payload.patch())
    if user_row is None:
        raise _not_found()
    logger.info("user_updated user_id=%s", user_id)
    return _to_user_response(user_row)


async def delete_user(database: db.Database, user_id: int) -> None:
    with _storage_errors("delete_user"):
        deleted = await repository.delete_user(database, user_id)
    if not deleted:
        raise _not_found()
    logger.info("user_deleted user_id=%s", user_id)
