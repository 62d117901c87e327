from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core.config import Settings, configure_logging, cors_origins_from_env, log_level_from_env
from core.context import AppContext, build_context, close_context, open_context
from events import router as events_router
from tables import router as tables_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # An injected context (tests) is owned by whoever built it.
    if app.state.context is not None:
        yield
        return

    context = build_context(Settings.from_env())
    await open_context(context)
    app.state.context = context
    try:
        yield
    finally:
        app.state.context = None
        await close_context(context)


def create_app(context: AppContext | None = None) -> FastAPI:
    settings = context.settings if context is not None else None
    configure_logging(settings.log_level if settings is not None else log_level_from_env())

    app = FastAPI(title="Events Catalog API", version="0.1.0", lifespan=lifespan)
    app.state.context = context

    # Allow local frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins if settings is not None else cors_origins_from_env()),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events_router.router, tags=["events"])
    app.include_router(tables_router.router, tags=["data"])
    app.include_router(auth_router.router, tags=["auth"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
