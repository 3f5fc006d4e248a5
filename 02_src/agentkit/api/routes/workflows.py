"""Workflow API routes."""

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...app import Application


class WorkflowStepResponse(BaseModel):
    """Response model for a workflow step."""

    role: str
    input: str | None


class WorkflowResponse(BaseModel):
    """Response model for a workflow template."""

    id: str
    name: str
    pattern: str
    steps: list[WorkflowStepResponse]


class RunWorkflowRequest(BaseModel):
    """Request model for running a workflow."""

    prompt: str = Field(min_length=1)


class RunWorkflowResponse(BaseModel):
    """Response model for a workflow run."""

    workflow_id: str
    outputs: dict[str, str]


def create_workflows_router(app: Application) -> APIRouter:
    """Create workflows router."""
    router = APIRouter(prefix="/api/workflows", tags=["workflows"])

    @router.get("", response_model=list[WorkflowResponse])
    async def list_workflows() -> list[dict]:
        """List workflow templates."""
        return [
            {
                "id": w.id,
                "name": w.name,
                "pattern": w.pattern.value,
                "steps": [{"role": s.role.value, "input": s.input} for s in w.steps],
            }
            for w in app.list_workflows()
        ]

    @router.get("/states")
    async def list_workflow_states() -> list[dict]:
        """List workflow execution states."""
        try:
            return [state.to_dict() for state in app.state_store.list_workflow_states()]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/{workflow_id}/run", response_model=RunWorkflowResponse)
    async def run_workflow(workflow_id: str, request: RunWorkflowRequest) -> dict:
        """Run a workflow and wait for its outputs."""
        try:
            outputs = await app.run_workflow(workflow_id, request.prompt)
            return {
                "workflow_id": workflow_id,
                "outputs": {role.value: output for role, output in outputs.items()},
            }
        except KeyError as e:
            raise HTTPException(status_code=404, detail=e.args[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
