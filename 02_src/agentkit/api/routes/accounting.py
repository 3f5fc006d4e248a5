"""Accounting API routes."""

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...app import Application


class BudgetRequest(BaseModel):
    """Request model for configuring the daily budget."""

    daily_limit: int = Field(gt=0)
    warning_fraction: float = Field(0.8, gt=0, le=1)


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_accounting_router(app: Application) -> APIRouter:
    """Create accounting router."""
    router = APIRouter(prefix="/api/accounting", tags=["accounting"])

    def snapshot_response() -> dict:
        data = app.get_accounting_snapshot().to_dict()
        data["budget_status"] = app.accounting.budget_status()
        return data

    @router.get("")
    async def get_accounting() -> dict:
        """Get the accounting snapshot and budget usage."""
        try:
            return snapshot_response()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/reset", response_model=StatusResponse)
    async def reset_accounting() -> dict:
        """Zero all counters; the budget is kept."""
        try:
            app.reset_accounting()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.put("/budget")
    async def set_budget(request: BudgetRequest) -> dict:
        """Enable a daily token budget."""
        try:
            app.set_budget(request.daily_limit, request.warning_fraction)
            return snapshot_response()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.delete("/budget")
    async def disable_budget() -> dict:
        """Disable budget checks."""
        try:
            app.disable_budget()
            return snapshot_response()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
