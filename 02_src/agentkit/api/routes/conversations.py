"""Conversation API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_conversations_router(app: Application) -> APIRouter:
    """Create conversations router."""
    router = APIRouter(prefix="/api/conversations", tags=["conversations"])

    @router.get("")
    async def list_conversations() -> list[dict]:
        """List resumable conversations."""
        try:
            return [session.to_dict() for session in app.conversations.list_sessions()]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.delete("", response_model=StatusResponse)
    async def clear_conversations() -> dict:
        """Forget every conversation."""
        try:
            app.clear_conversations()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.delete("/{role}", response_model=StatusResponse)
    async def clear_conversation(role: str) -> dict:
        """Forget one role's conversation."""
        try:
            app.clear_conversation(role)
            return {"status": "ok"}
        except KeyError as e:
            raise HTTPException(status_code=404, detail=e.args[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
