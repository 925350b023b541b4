"""Write-through cache of the last roadmap / gap analysis generated per
(email, current role, target role). Payloads are stored as raw JSON text;
readers must treat them as untrusted hints."""

import json
import logging
from typing import NamedTuple, Protocol

from pydantic import BaseModel
from sqlalchemy import select

from db.models import CachedArtifactModel
from db.repository import normalize_email
from db.session import session_scope

logger = logging.getLogger(__name__)

ROADMAP = "roadmap"
ANALYSIS = "analysis"


class CacheKey(NamedTuple):
    email: str
    role: str
    target_role: str


def cache_key(email: str, role: str, target_role: str) -> CacheKey:
    return CacheKey(normalize_email(email), role or "", target_role or "")


class ArtifactCache(Protocol):
    def get(self, kind: str, key: CacheKey) -> str | None: ...

    def put(self, kind: str, key: CacheKey, payload: str) -> None: ...


def dump_payload(value: BaseModel | list[BaseModel]) -> str:
    if isinstance(value, list):
        return json.dumps([v.model_dump() for v in value])
    return value.model_dump_json()


class SqlArtifactCache:
    """ArtifactCache backed by the ``cached_artifacts`` table."""

    def get(self, kind: str, key: CacheKey) -> str | None:
        with session_scope() as session:
            row = session.execute(self._select(kind, key)).scalar_one_or_none()
            return row.payload if row is not None else None

    def put(self, kind: str, key: CacheKey, payload: str) -> None:
        with session_scope() as session:
            row = session.execute(self._select(kind, key)).scalar_one_or_none()
            if row is None:
                session.add(
                    CachedArtifactModel(
                        kind=kind,
                        email=key.email,
                        role=key.role,
                        target_role=key.target_role,
                        payload=payload,
                    )
                )
            else:
                row.payload = payload
        logger.debug("Cached %s for %s", kind, key.email)

    @staticmethod
    def _select(kind: str, key: CacheKey):
        return select(CachedArtifactModel).where(
            CachedArtifactModel.kind == kind,
            CachedArtifactModel.email == key.email,
            CachedArtifactModel.role == key.role,
            CachedArtifactModel.target_role == key.target_role,
        )
