"""Panel payload endpoint consumed by the panel renderer."""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_store
from ..stores.kv_store import PANEL_DATA_KEY, SqlKeyValueStore

router = APIRouter(prefix="/panel", tags=["panel"])


@router.get("")
def read_panel(store: SqlKeyValueStore = Depends(get_store)) -> dict[str, Any]:
    """Return the latest panel payload produced by a successful lookup."""

    payload = store.get(PANEL_DATA_KEY)
    if payload is None:
        raise HTTPException(status_code=404, detail="No panel data yet")
    return payload
