"""Control API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


class ReloadResponse(BaseModel):
    """Response model for an agent directory rescan."""

    profiles: int


class EngineStatusResponse(BaseModel):
    """Response model for the engine summary."""

    worker: str
    running_agents: list[str]
    running_workflows: list[str]
    profiles: int


def create_control_router(app: Application) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.get("/status", response_model=EngineStatusResponse)
    async def engine_status() -> dict:
        """Worker in use and what is running right now."""
        try:
            return app.status()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/reload-agents", response_model=ReloadResponse)
    async def reload_agents() -> dict:
        """Pick up edited agent markdown files without a restart."""
        try:
            return {"profiles": app.reload_agents()}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/reset", response_model=StatusResponse)
    async def reset_system() -> dict:
        """Stop everything and clear all data between test runs."""
        try:
            await app.reset()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
