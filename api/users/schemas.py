"""
User API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel


class CreateUserRequest(BaseModel):
    name: str
    email: str


class UpdateUserRequest(BaseModel):
    # Omitted or null fields keep their stored value.
    name: str | None = None
    email: str | None = None

    def patch(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: str
    updated_at: str
