"""Offline-first cache for the app's static assets.

Core assets are fetched into a versioned cache on install, caches from
other versions are dropped on activate, and every other request is served
cache-first with the network as fallback. Cached responses are stored in
the database so they outlive the process.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List
from urllib.parse import urljoin, urlsplit

import requests
from sqlalchemy.orm import sessionmaker

from database import SessionLocal
from models import AssetCacheDB

logger = logging.getLogger(__name__)

CACHE_NAME = "gym-buddy-v1"
ASSETS_TO_CACHE = [
    "/",
    "/index.html",
    "/manifest.json",
    "/logo192.png",
    "/logo512.png",
]

ASSET_ORIGIN = os.environ.get("ASSET_ORIGIN")


@dataclass
class CachedResponse:
    status_code: int
    content: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str | None:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return None

    @classmethod
    def from_response(cls, response: requests.Response) -> "CachedResponse":
        return cls(response.status_code, response.content, dict(response.headers))


class AssetCache:
    def __init__(
        self,
        origin: str,
        cache_name: str = CACHE_NAME,
        assets: List[str] | None = None,
        http: requests.Session | None = None,
        timeout: float = 10.0,
        session_factory: sessionmaker = SessionLocal,
    ):
        self.origin = origin.rstrip("/")
        self.cache_name = cache_name
        self.assets = list(ASSETS_TO_CACHE if assets is None else assets)
        self.http = http or requests.Session()
        self.timeout = timeout
        self.session_factory = session_factory

    def _url(self, path: str) -> str:
        return urljoin(self.origin + "/", path.lstrip("/"))

    def _is_same_origin(self, response: requests.Response) -> bool:
        origin = urlsplit(self.origin)
        final = urlsplit(response.url or "")
        return (final.scheme, final.netloc) == (origin.scheme, origin.netloc)

    def _get(self, path: str) -> requests.Response:
        return self.http.get(self._url(path), timeout=self.timeout)

    def _put(self, entries: Dict[str, CachedResponse]) -> None:
        db = self.session_factory()
        try:
            for path, cached in entries.items():
                db.merge(
                    AssetCacheDB(
                        cache_name=self.cache_name,
                        path=path,
                        status_code=cached.status_code,
                        content=cached.content,
                        headers=cached.headers,
                    )
                )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def cache_names(self) -> List[str]:
        """Names of every cache currently stored, in sorted order."""
        db = self.session_factory()
        try:
            rows = db.query(AssetCacheDB.cache_name).distinct().all()
            return sorted(name for (name,) in rows)
        finally:
            db.close()

    def match(self, path: str) -> CachedResponse | None:
        """Look a path up in the current cache only."""
        db = self.session_factory()
        try:
            row = db.get(AssetCacheDB, (self.cache_name, path))
            if row is None:
                return None
            return CachedResponse(row.status_code, row.content, dict(row.headers or {}))
        finally:
            db.close()

    def install(self) -> None:
        """Fetch every core asset into the current cache.

        Nothing is stored unless every asset was fetched.

        Raises:
            requests.HTTPError: If any core asset cannot be fetched
        """
        entries = {}
        for path in self.assets:
            response = self._get(path)
            response.raise_for_status()
            entries[path] = CachedResponse.from_response(response)
        self._put(entries)
        logger.info("Installed %d assets into %s", len(entries), self.cache_name)

    def activate(self) -> List[str]:
        """Delete caches left over from other versions; returns their names."""
        db = self.session_factory()
        try:
            stale = [
                name
                for (name,) in db.query(AssetCacheDB.cache_name)
                .filter(AssetCacheDB.cache_name != self.cache_name)
                .distinct()
                .all()
            ]
            if stale:
                db.query(AssetCacheDB).filter(
                    AssetCacheDB.cache_name.in_(stale)
                ).delete(synchronize_session=False)
                db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        for name in stale:
            logger.info("Deleted stale asset cache %s", name)
        return sorted(stale)

    def fetch(self, path: str) -> CachedResponse:
        """Serve from cache, falling back to the network.

        Successful same-origin responses are stored for next time; anything
        else is passed through without caching.
        """
        cached = self.match(path)
        if cached is not None:
            return cached

        response = self._get(path)
        result = CachedResponse.from_response(response)
        if response.status_code == 200 and self._is_same_origin(response):
            self._put({path: result})
        return result
