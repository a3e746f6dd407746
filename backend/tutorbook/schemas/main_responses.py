"""Responses for app-level endpoints."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    database: str = Field(description="Database connectivity: ok or error")
