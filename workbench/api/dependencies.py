from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, Request, status

from ..app import AppState, get_app_state


def management_guard(
    request: Request,
    state: AppState = Depends(get_app_state),
) -> str:
    expected = state.management_token
    if not expected:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="disabled")
    header = request.headers.get("authorization", "")
    scheme, _, provided = header.partition(" ")
    if scheme.lower() != "bearer" or not provided:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="authorization required")
    if not secrets.compare_digest(provided.strip(), expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="authorization error")
    return provided
