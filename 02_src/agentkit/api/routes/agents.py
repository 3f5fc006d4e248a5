"""Agent API routes."""

from typing import Any

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...app import Application


class AgentProfileResponse(BaseModel):
    """Response model for an agent profile."""

    role: str
    name: str
    icon: str
    description: str
    capabilities: list[str]
    model: str
    model_tier: str | None
    response_mode: str | None
    source: str


class RunAgentRequest(BaseModel):
    """Request model for running an agent."""

    prompt: str = Field(min_length=1)


class RunResultResponse(BaseModel):
    """Response model for a run result."""

    success: bool
    output: str
    error: str | None
    exit_code: int | None
    token_usage: dict[str, Any] | None
    session_id: str | None


class StopResponse(BaseModel):
    """Response model for stopping one agent."""

    stopped: bool


class StopAllResponse(BaseModel):
    """Response model for stopping all agents."""

    stopped: list[str]


def create_agents_router(app: Application) -> APIRouter:
    """Create agents router."""
    router = APIRouter(prefix="/api/agents", tags=["agents"])

    @router.get("", response_model=list[AgentProfileResponse])
    async def list_agents() -> list[dict]:
        """List agent profiles."""
        try:
            return [
                {
                    "role": p.role.value,
                    "name": p.name,
                    "icon": p.icon,
                    "description": p.description,
                    "capabilities": list(p.capabilities),
                    "model": app.runner.resolve_model(p),
                    "model_tier": p.model_tier.value if p.model_tier else None,
                    "response_mode": p.response_mode.value if p.response_mode else None,
                    "source": p.source,
                }
                for p in app.registry.list_profiles()
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/states")
    async def list_agent_states() -> list[dict]:
        """List agent execution states."""
        try:
            return [state.to_dict() for state in app.state_store.list_agent_states()]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/stop-all", response_model=StopAllResponse)
    async def stop_all_agents() -> dict:
        """Stop every running agent."""
        try:
            return {"stopped": [role.value for role in app.stop_all_agents()]}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/{role}/run", response_model=RunResultResponse)
    async def run_agent(role: str, request: RunAgentRequest) -> dict:
        """Run an agent and wait for its result."""
        try:
            result = await app.run_agent(role, request.prompt)
            return {
                "success": result.success,
                "output": result.output,
                "error": result.error,
                "exit_code": result.exit_code,
                "token_usage": result.token_usage.to_dict() if result.token_usage else None,
                "session_id": result.session_id,
            }
        except KeyError as e:
            raise HTTPException(status_code=404, detail=e.args[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/{role}/stop", response_model=StopResponse)
    async def stop_agent(role: str) -> dict:
        """Stop a running agent."""
        try:
            return {"stopped": app.stop_agent(role)}
        except KeyError as e:
            raise HTTPException(status_code=404, detail=e.args[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
