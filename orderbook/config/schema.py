"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "http://localhost:3000/api"
    timeout: float = Field(default=30.0, gt=0.0)
    page_limit: int = Field(default=50, ge=1, le=200)
    api_token: str = ""


class PricingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    url: str = "http://localhost:3000/api/pricing"
    timeout: float = Field(default=30.0, gt=0.0)


class SyncConfig(BaseModel):
    model_config = {"extra": "forbid"}

    completion_grace_seconds: float = Field(default=1.0, ge=0.0)


class ClientConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    pricing: PricingConfig = PricingConfig()
    sync: SyncConfig = SyncConfig()
