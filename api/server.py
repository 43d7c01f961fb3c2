"""
Stand-in broker for quoterelay.

This module defines a minimal HTTP receiver using FastAPI. It accepts
relayed updates at `POST /updates`, validating each body as an
UpdateRecord, and keeps them in memory so they can be listed at
`GET /updates`. A health endpoint at `/health` returns the service status.
Run it locally with ``uvicorn api.server:app`` and point
QUOTERELAY_BROKER_URL at ``http://localhost:8000/updates``.
"""

from typing import Any, Dict, List

from fastapi import FastAPI

from quoterelay.data.models import UpdateRecord

app = FastAPI(title="quoterelay broker stub", version="0.1.0")

received: List[UpdateRecord] = []


@app.get("/health", summary="Health check", tags=["system"])
async def health() -> dict[str, str]:
    """Return a simple health check status."""
    return {"status": "ok"}


@app.post("/updates", summary="Receive an update", tags=["updates"])
async def receive_update(record: UpdateRecord) -> Dict[str, Any]:
    """Store a relayed update and echo it back in wire format."""
    received.append(record)
    return {"status": "accepted", "update": record.to_payload()}


@app.get("/updates", summary="List received updates", tags=["updates"])
async def list_updates() -> List[Dict[str, Any]]:
    """Return every update received since startup, oldest first."""
    return [record.to_payload() for record in received]


@app.delete("/updates", summary="Clear received updates", tags=["updates"])
async def clear_updates() -> Dict[str, int]:
    """Forget all received updates."""
    count = len(received)
    received.clear()
    return {"cleared": count}
