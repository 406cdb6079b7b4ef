"""
Analysis result caching with Redis or in-memory backends
"""

from typing import Any, Optional

import orjson
from aiocache import Cache
from aiocache.serializers import BaseSerializer

from marketlens.core.config import settings
from marketlens.core.logging import log


class OrjsonSerializer(BaseSerializer):
    """Fast JSON serializer using orjson"""

    DEFAULT_ENCODING = None

    def dumps(self, value: Any) -> bytes:
        return orjson.dumps(value)

    def loads(self, value: Optional[bytes]) -> Any:
        if value is None:
            return None
        return orjson.loads(value)


def analysis_key(session_id: str) -> str:
    return f"analysis:{session_id}"


class AnalysisCache:
    """
    Cache for aggregated analysis results.

    Only completed sessions are stored; the pipeline never touches a
    completed session again, so entries only go stale on cleanup.
    """

    def __init__(self, backend: Optional[Cache] = None, ttl: Optional[int] = None):
        self.backend = backend or _build_backend()
        self.ttl = ttl if ttl is not None else settings.cache_ttl

    async def get(self, session_id: str) -> Optional[dict]:
        try:
            return await self.backend.get(analysis_key(session_id))
        except Exception as e:
            log.warning("Cache get failed for session {}: {}", session_id, e)
            return None

    async def set(self, session_id: str, value: dict) -> bool:
        try:
            return await self.backend.set(analysis_key(session_id), value, ttl=self.ttl)
        except Exception as e:
            log.warning("Cache set failed for session {}: {}", session_id, e)
            return False

    async def invalidate(self, session_id: str) -> bool:
        try:
            return bool(await self.backend.delete(analysis_key(session_id)))
        except Exception as e:
            log.warning("Cache delete failed for session {}: {}", session_id, e)
            return False

    async def clear(self) -> None:
        await self.backend.clear()


def _build_backend() -> Cache:
    if settings.redis_url:
        from urllib.parse import urlparse

        parsed = urlparse(settings.redis_url)
        log.info("Using Redis cache at {}:{}", parsed.hostname, parsed.port or 6379)
        return Cache(
            Cache.REDIS,
            endpoint=parsed.hostname or "localhost",
            port=parsed.port or 6379,
            serializer=OrjsonSerializer(),
            namespace="marketlens",
        )

    return Cache(Cache.MEMORY, serializer=OrjsonSerializer(), namespace="marketlens")


_analysis_cache: Optional[AnalysisCache] = None


def get_analysis_cache() -> AnalysisCache:
    """Get the process-wide analysis cache"""
    global _analysis_cache
    if _analysis_cache is None:
        _analysis_cache = AnalysisCache()
    return _analysis_cache
