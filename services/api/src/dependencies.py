"""
Process-lifetime handles injected into routes with ``Depends``.

Each handle is built once on first use and reused across requests; tests swap
them through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from symbolicator import HttpFetcher, SourceMapCache, SymbolicationPipeline

from .contact_client import ContactClient
from .geocode import ReverseGeocoder
from .settings import Settings, load_settings
from .stores.errors_store import ErrorsStore


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_errors_store() -> ErrorsStore:
    settings = get_settings()
    return ErrorsStore(
        settings.errors_table,
        settings.aws_region,
        project_index=settings.errors_project_index,
    )


@lru_cache(maxsize=1)
def get_sourcemap_cache() -> Optional[SourceMapCache]:
    size = get_settings().sourcemap_cache_size
    return SourceMapCache(max_entries=size) if size > 0 else None


@lru_cache(maxsize=1)
def get_pipeline() -> SymbolicationPipeline:
    settings = get_settings()
    return SymbolicationPipeline(
        HttpFetcher(timeout_seconds=settings.fetch_timeout_seconds),
        cache=get_sourcemap_cache(),
        max_workers=settings.symbolicate_max_workers,
    )


@lru_cache(maxsize=1)
def get_geocoder() -> ReverseGeocoder:
    settings = get_settings()
    return ReverseGeocoder(
        settings.geocode_url,
        settings.geocode_user_agent,
        timeout_seconds=settings.geocode_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_contact_client() -> ContactClient:
    return ContactClient(get_settings().contact_api_base)
