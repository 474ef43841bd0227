"""Shared response models."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(examples=["ok"])
    version: str = Field(examples=["0.1.0"])
    app_name: str = Field(examples=["HDFS Usage Stats"])
