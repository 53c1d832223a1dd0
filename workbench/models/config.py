from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    health: str = "OK"


class ConfigResponse(BaseModel):
    """Effective configuration exposed to operators, secrets redacted."""

    cluster_id: str
    config: Dict[str, Any]
    unmigrated_keys: List[str] = Field(
        default_factory=list,
        description="Legacy application.yml keys with no equivalent in the cluster configuration",
    )
