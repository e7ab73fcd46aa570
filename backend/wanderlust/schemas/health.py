"""
Wanderlust Backend — Health Check Schema
==========================================

What:  Response body of GET /health.
Why:   A backend that cannot reach its database is effectively down, so the
       health check reports database connectivity alongside the version.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
