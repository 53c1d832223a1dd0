from __future__ import annotations

from fastapi import APIRouter, Depends

from ..app import AppState, get_app_state
from ..config.export import redact_secrets, to_plain
from ..models import ConfigResponse
from .dependencies import management_guard

router = APIRouter(tags=["config"])


@router.get("/config", response_model=ConfigResponse, dependencies=[Depends(management_guard)])
async def get_config(state: AppState = Depends(get_app_state)) -> ConfigResponse:
    loaded = state.loaded
    return ConfigResponse(
        cluster_id=loaded.cluster_id,
        config=to_plain(redact_secrets(loaded.config)),
        unmigrated_keys=sorted(str(key) for key in loaded.remaining),
    )
