from __future__ import annotations

import hashlib
import html
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from endpoints.rate_limit import client_key, contact_rate_limit
from persistence import ContactLog, JsonDocumentStore, StoreDocument

router = APIRouter(prefix="/api", tags=["api"])
logger = logging.getLogger(__name__)

EMAIL_RE = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class ContactSubmission(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(max_length=254, pattern=EMAIL_RE)
    message: str = Field(min_length=1, max_length=2000)


def get_store(request: Request) -> JsonDocumentStore:
    return request.app.state.store


def get_contact_log(request: Request) -> ContactLog:
    return request.app.state.contact_log


def _utc_now_iso() -> str:
    # 2025-01-01T12:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _ip_hash(request: Request) -> str:
    return hashlib.sha256(client_key(request).encode("utf-8")).hexdigest()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/endorse")
async def get_endorsements(store: JsonDocumentStore = Depends(get_store)) -> dict[str, int]:
    data = await store.get()
    return {"count": data["endorsements"]}


@router.post("/endorse")
async def endorse(store: JsonDocumentStore = Depends(get_store)) -> dict[str, int]:
    def _increment(doc: StoreDocument) -> dict[str, int]:
        doc["endorsements"] = int(doc.get("endorsements") or 0) + 1
        return {"count": doc["endorsements"]}

    return await store.update(_increment)


@router.post("/visitors")
async def record_visitor(store: JsonDocumentStore = Depends(get_store)) -> dict[str, int]:
    def _increment(doc: StoreDocument) -> dict[str, int]:
        doc["visitors"] = int(doc.get("visitors") or 0) + 1
        return {"total": doc["visitors"]}

    return await store.update(_increment)


@router.get("/projects")
async def list_projects(store: JsonDocumentStore = Depends(get_store)) -> list[Any]:
    data = await store.get()
    return data["projects"]


@router.post("/contact", dependencies=[Depends(contact_rate_limit)])
async def contact(
    request: Request,
    store: JsonDocumentStore = Depends(get_store),
    contact_log: ContactLog = Depends(get_contact_log),
):
    try:
        body = await request.json()
    except ValueError:
        body = {}

    try:
        payload = ContactSubmission.model_validate(body)
    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid contact submission",
                "issues": e.errors(include_url=False, include_context=False, include_input=False),
            },
        )

    received_at = _utc_now_iso()
    entry = {
        "name": html.escape(payload.name),
        "email": html.escape(payload.email),
        "message": html.escape(payload.message),
        "receivedAt": received_at,
        "ipHash": _ip_hash(request),
    }

    def _stamp(doc: StoreDocument) -> None:
        doc["lastContactAt"] = received_at

    await store.update(_stamp)
    await contact_log.append(entry)
    logger.info("CONTACT: recorded submission at %s", received_at)

    return {"ok": True}
