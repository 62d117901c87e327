"""
Auth business logic.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from core.context import AppContext
from core.db import DuplicateRowError

from . import repository, schemas, security


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        email=str(user_row["email"]),
        is_active=bool(user_row["is_active"]),
        created_at=user_row.get("created_at"),
    )


def _issue(context: AppContext, user_row: dict) -> schemas.AuthResponse:
    access_token = security.build_access_token(
        user_id=int(user_row["id"]),
        email=str(user_row["email"]),
        settings=context.settings,
    )
    return schemas.AuthResponse(user=_to_user_response(user_row), access_token=access_token)


async def register(context: AppContext, payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    existing = await repository.get_user_by_email(context.database, payload.email)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        )

    password_hash = security.hash_password(payload.password)
    try:
        user_row = await repository.create_user(
            context.database,
            email=payload.email,
            password_hash=password_hash,
        )
    except DuplicateRowError as exc:
        # A concurrent registration won the unique index on lower(email).
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        ) from exc
    return _issue(context, user_row)


async def login(context: AppContext, payload: schemas.LoginRequest) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(context.database, payload.email)
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive.",
        )

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    return _issue(context, user_row)


async def get_user_from_access_token(context: AppContext, access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token, settings=context.settings)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token subject.",
        )

    user_row = await repository.get_user_by_id(context.database, int(subject))
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found.",
        )
    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive.",
        )
    return user_row


def me(user_row: dict) -> schemas.UserResponse:
    return _to_user_response(user_row)
