"""Shared schema pieces: camelCase wire models and the plain message response."""

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for schemas whose JSON keys are camelCase aliases of snake_case fields."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class MessageResponse(BaseModel):
    """Plain acknowledgement or error body: {"message": "..."}."""

    message: str = Field(..., description="Human-readable status message")
