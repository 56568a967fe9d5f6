"""API response data models."""

from pydantic import BaseModel


class WebhookResponse(BaseModel):
    """Response from webhook handler."""

    status: str
    message: str


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str
    version: str
