"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.context import AppContext, get_context

from . import dependencies, schemas, service

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    context: AppContext = Depends(get_context),
) -> schemas.AuthResponse:
    return await service.register(context, payload)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    payload: schemas.LoginRequest,
    context: AppContext = Depends(get_context),
) -> schemas.AuthResponse:
    return await service.login(context, payload)


@router.get("/me", response_model=schemas.UserResponse)
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> schemas.UserResponse:
    return service.me(current_user)
