"""FastAPI application setup."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .routes import accounting, agents, control, conversations, observability, workflows

# Vite dev servers
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:5174")

_ROUTER_FACTORIES = (
    agents.create_agents_router,
    workflows.create_workflows_router,
    accounting.create_accounting_router,
    conversations.create_conversations_router,
    observability.create_observability_router,
    control.create_control_router,
)


def cors_origins() -> list[str]:
    """Allowed origins from AGENTKIT_CORS_ORIGINS (comma separated)."""
    raw = os.getenv("AGENTKIT_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or list(DEFAULT_CORS_ORIGINS)


def create_fastapi_app(application: Application) -> FastAPI:
    """Build the API around an Application.

    The Application is started and stopped by the FastAPI lifespan.

    Args:
        application: Application to serve
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="agentkit API",
        description="Run agents and multi-agent workflows; inspect state, usage and traces",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for create_router in _ROUTER_FACTORIES:
        fastapi_app.include_router(create_router(application))

    return fastapi_app
