from __future__ import annotations

import copy
import math
from typing import Any, Mapping, NotRequired, TypedDict

from pydantic import BaseModel


class ProjectRecord(BaseModel):
    name: str
    desc: str
    link: str


class StoreDocument(TypedDict):
    """
    Mirrors the on-disk store.json schema:
      {
        "endorsements": 0,
        "visitors": 0,
        "projects": [{"name": ..., "desc": ..., "link": ...}],
        "lastContactAt": "2025-01-01T00:00:00+00:00"   (optional)
      }
    Unknown keys are carried along untouched.
    """

    endorsements: int
    visitors: int
    projects: list[dict[str, Any]]
    lastContactAt: NotRequired[str]


DEFAULT_PROJECTS: list[ProjectRecord] = [
    ProjectRecord(name="Deal Screener", desc="Rank companies by traction and unit economics.", link="#"),
    ProjectRecord(name="Portfolio Dashboard", desc="Tracks positions & risk.", link="#"),
    ProjectRecord(name="Class Scheduler", desc="Simple web app to optimize course schedules.", link="#"),
]

DEFAULT_DOCUMENT: StoreDocument = {
    "endorsements": 0,
    "visitors": 0,
    "projects": [p.model_dump(mode="json") for p in DEFAULT_PROJECTS],
}


def _coerce_counter(value: Any, fallback: Any) -> Any:
    if isinstance(value, bool):  # bool is subclass of int in Python
        return fallback
    if isinstance(value, (int, float)) and math.isfinite(value):
        return max(0, int(value))
    return fallback


def _coerce_projects(value: Any, fallback: list[dict[str, Any]]) -> list[Any]:
    if isinstance(value, list) and len(value) > 0:
        return value
    return copy.deepcopy(fallback)


def normalize(raw: Any, defaults: Mapping[str, Any] = DEFAULT_DOCUMENT) -> StoreDocument:
    """
    Reconcile an arbitrary loaded or mutated candidate with the default document.

    Never raises: any field that cannot be coerced falls back to the default value.
    Default keys keep their position; extra keys from `raw` follow in their own order.
    """
    candidate: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    doc: dict[str, Any] = copy.deepcopy(dict(defaults))
    for key, value in candidate.items():
        doc[str(key)] = value

    doc["endorsements"] = _coerce_counter(candidate.get("endorsements"), defaults.get("endorsements", 0))
    doc["visitors"] = _coerce_counter(candidate.get("visitors"), defaults.get("visitors", 0))
    doc["projects"] = _coerce_projects(candidate.get("projects"), defaults.get("projects", []))
    return doc  # type: ignore[return-value]


def default_document(defaults: Mapping[str, Any] = DEFAULT_DOCUMENT) -> StoreDocument:
    return normalize({}, defaults)
