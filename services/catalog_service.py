# 📦 /services/catalog_service.py

import threading
from typing import List, Optional, Protocol

import structlog
from prometheus_client import Counter, Gauge

from engine.geography import Geography
from utils.load_providers import Provider, load_catalog

log = structlog.get_logger()

CATALOG_SIZE_GAUGE = Gauge("coachmatch_catalog_providers", "Providers in the loaded catalog")
CATALOG_RELOAD_COUNTER = Counter("coachmatch_catalog_reloads", "Catalog loads from the source")


class ProviderSource(Protocol):
    def providers(self) -> List[Provider]:
        ...


class CsvProviderSource:
    """Reads the catalog file on every call."""

    def __init__(self, path, geography: Optional[Geography] = None):
        self.path = path
        self.geography = geography

    def providers(self) -> List[Provider]:
        return load_catalog(self.path, geography=self.geography)


class CatalogCache:
    """In-process catalog, loaded once and swapped on reload."""

    def __init__(self, source: ProviderSource):
        self.source = source
        self._providers: Optional[List[Provider]] = None
        self._lock = threading.Lock()

    def providers(self) -> List[Provider]:
        cached = self._providers
        if cached is not None:
            return cached
        with self._lock:
            if self._providers is None:
                self._providers = self._load()
            return self._providers

    def reload(self) -> List[Provider]:
        fresh = self._load()
        with self._lock:
            self._providers = fresh
        return fresh

    def clear(self) -> None:
        with self._lock:
            self._providers = None

    @property
    def loaded(self) -> bool:
        return self._providers is not None

    def _load(self) -> List[Provider]:
        providers = self.source.providers()
        CATALOG_RELOAD_COUNTER.inc()
        CATALOG_SIZE_GAUGE.set(len(providers))
        log.info("Provider catalog loaded", providers=len(providers))
        return providers
