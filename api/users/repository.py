"""
User persistence (raw SQL).

Every function runs exactly one statement. Lookups by id return None / False
when no row matches; driver errors arrive already translated by `core.db`.
"""

from __future__ import annotations

from typing import Any

from core import db

# users.id is BIGSERIAL; larger ids cannot exist and would fail argument encoding.
MAX_USER_ID = 2**63 - 1

_USER_COLUMNS = "id, name, email, created_at, updated_at"


def _id_in_range(user_id: int) -> bool:
    return -MAX_USER_ID - 1 <= user_id <= MAX_USER_ID


async def create_user(database: db.Database, *, name: str, email: str) -> dict[str, Any]:
    """
    Insert a user. created_at and updated_at share the statement's now().

    Raises db.UniqueViolation when the email is taken.
    """
    row = await database.fetch_one(
        f"""
        INSERT INTO users (name, email, created_at, updated_at)
        VALUES ($1, $2, now(), now())
        RETURNING {_USER_COLUMNS}
        """,
        name,
        email,
    )
    if row is None:
        raise db.DatabaseError("Failed to create user.")
    return row


async def list_users(database: db.Database) -> list[dict[str, Any]]:
    return await database.fetch_all(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        ORDER BY id ASC
        """
    )


async def get_user(database: db.Database, user_id: int) -> dict[str, Any] | None:
    if not _id_in_range(user_id):
        return None
    return await database.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def update_user(
    database: db.Database,
    user_id: int,
    patch: dict[str, str],
) -> dict[str, Any] | None:
    """
    Apply a partial update. Only keys present in `patch` change;
    updated_at is refreshed even when the patch is empty.
    """
    if not _id_in_range(user_id):
        return None
    return await database.fetch_one(
        f"""
        UPDATE users
        SET name = COALESCE($2, name),
            email = COALESCE($3, email),
            updated_at = now()
        WHERE id = $1
        RETURNING {_USER_COLUMNS}
        """,
        user_id,
        patch.get("name"),
        patch.get("email"),
    )


async def delete_user(database: db.Database, user_id: int) -> bool:
    if not _id_in_range(user_id):
        return False
    row = await database.fetch_one(
        """
        DELETE FROM users
        WHERE id = $1
        RETURNING id
        """,
        user_id,
    )
    return row is not None
