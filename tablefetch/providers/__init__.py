# providers/__init__.py
from __future__ import annotations

from typing import Dict, Optional, Type
from urllib.parse import urlparse

from .airtable import AirtableIds, AirtableProvider
from .base import RecordProvider, build_filter_formula
from .vika import VikaIds, VikaProvider

PROVIDER_MAP: Dict[str, Type[RecordProvider]] = {
    "airtable": AirtableProvider,
    "vika": VikaProvider,
}

_HOSTS: Dict[str, str] = {
    "airtable.com": "airtable",
    "vika.cn": "vika",
}


def get_provider_class(url: str, default: str = "airtable") -> Type[RecordProvider]:
    """Pick the provider by the host of *url*, else fall back to *default*."""
    host: Optional[str] = urlparse(url or "").hostname
    if host:
        for suffix, name in _HOSTS.items():
            if host == suffix or host.endswith(f".{suffix}"):
                return PROVIDER_MAP[name]
    return PROVIDER_MAP[default]


__all__ = [
    "PROVIDER_MAP",
    "RecordProvider",
    "AirtableProvider",
    "AirtableIds",
    "VikaProvider",
    "VikaIds",
    "build_filter_formula",
    "get_provider_class",
]
