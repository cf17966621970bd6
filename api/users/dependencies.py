"""
Request-scoped dependencies for user routes.
"""

from __future__ import annotations

from fastapi import Request

from core import db


def get_database(request: Request) -> db.Database:
    # Set once by create_app(); shared by every request.
    return request.app.state.database
