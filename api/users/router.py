"""
User CRUD API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from core import db

from . import schemas, service
from .dependencies import get_database

router = APIRouter()


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: schemas.CreateUserRequest,
    database: db.Database = Depends(get_database),
) -> schemas.UserResponse:
    return await service.create_user(database, request)


@router.get("/users")
async def list_users(
    database: db.Database = Depends(get_database),
) -> list[schemas.UserResponse]:
    return await service.list_users(database)


@router.get("/users/{user_id}")
async def get_user(
    user_id: int,
    database: db.Database = Depends(get_database),
) -> schemas.UserResponse:
    return await service.get_user(database, user_id)


@router.put("/users/{user_id}")
async def update_user(
    user_id: int,
    request: schemas.UpdateUserRequest,
    database: db.Database = Depends(get_database),
) -> schemas.UserResponse:
    return await service.update_user(database, user_id, request)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    database: db.Database = Depends(get_database),
) -> Response:
    await service.delete_user(database, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
