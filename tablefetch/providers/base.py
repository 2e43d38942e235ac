# tablefetch/providers/base.py
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from ..config import GlobalConfig
from ..exceptions import ErrorContext, NetworkError, format_error_for_logging
from ..models import ALL_SENTINEL, FetchSource
from ..notify import Notifier
from ..utils.http_session import create_session

log = logging.getLogger(__name__)

FILTER_FIELD = "UpdatedIn"


def build_filter_formula(filter_value: Optional[int]) -> str:
    """Return ``{UpdatedIn} <= N``, or ``""`` for no filter / the "all" option."""
    if filter_value is None or filter_value == ALL_SENTINEL:
        return ""
    return f"{{{FILTER_FIELD}}} <= {filter_value}"


class RecordProvider(ABC):
    """Pulls every record of one table view, following the offset cursor.

    Subclasses know how to read their provider's share URL, where the API
    lives and how the payload is wrapped; the loop itself is shared.
    """

    name: str = "base"
    api_url_root: str = ""

    def __init__(
        self,
        src: FetchSource,
        global_config: Optional[GlobalConfig] = None,
        *,
        notifier: Optional[Notifier] = None,
        session: Optional[requests.Session] = None,
    ):
        self.src = src
        self.global_config = global_config or GlobalConfig()
        self.notifier = notifier or Notifier()
        # injected sessions belong to the caller and are never closed here
        self._owns_session = session is None
        self.session: Optional[requests.Session] = session or create_session(
            src.api_key, user_agent=self.global_config.http.user_agent
        )
        self.last_error: Optional[NetworkError] = None
        self.ids = self.extract_ids(src.url)
        log.info("🚀 Initializing %s provider for source: %s", self.name, src.display_name)

    # ------------------------------------------------------------------ session
    def close_session(self) -> None:
        """Close the HTTP session if this provider created it."""
        if self._owns_session and self.session is not None:
            self.session.close()
            self.session = None
            log.debug("🔒 Closed HTTP session for %s", self.src.display_name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_session()

    # ------------------------------------------------------------------ URLs
    @classmethod
    @abstractmethod
    def extract_ids(cls, url: str) -> Any:
        """Resolve a share URL into identifiers; all empty strings on no match."""

    @abstractmethod
    def make_api_url(self, ids: Any) -> str:
        """Records endpoint for *ids*, already carrying its first query parameter."""

    def build_query_url(self, filter_value: Optional[int] = None) -> str:
        """Full request URL up to and including ``offset=``; the cursor is appended per page."""
        parts = [
            f"fields%5B%5D={quote(field_name, safe='')}"
            for field_name in self.global_config.fetch.fields
        ]

        formula = build_filter_formula(filter_value)
        if formula:
            parts.append(f"filterByFormula={quote(formula, safe='')}")
            log.debug("Applying recency filter: %s", formula)

        parts.append("offset=")
        return f"{self.make_api_url(self.ids)}&{'&'.join(parts)}"

    # ------------------------------------------------------------------ payload
    def _unwrap(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Return the mapping holding ``records`` and ``offset``."""
        return payload

    # ------------------------------------------------------------------ fetch
    def fetch_records(self, filter_value: Optional[int] = None) -> List[Dict[str, Any]]:
        """Fetch all raw records (``{"fields": {...}}``) of the configured view."""
        log.info(
            "🌐 Processing %s source: '%s' from URL: %s",
            self.name,
            self.src.display_name,
            self.src.url,
        )
        self.last_error = None
        query_url = self.build_query_url(filter_value)
        records = self._pagination_loop(query_url)
        log.info("✅ %s: %d records", self.src.display_name, len(records))
        return records

    def _request_page(self, url: str, page_num: int) -> Optional[Dict[str, Any]]:
        """Execute one page request and return the JSON payload, or None on failure."""
        response_obj: Optional[requests.Response] = None
        try:
            response_obj = self.session.get(url, timeout=self.global_config.http.timeout)
            response_obj.raise_for_status()
            return response_obj.json()
        except requests.exceptions.RequestException as e:
            response = getattr(e, "response", None)
            self.last_error = NetworkError(
                f"Failed to fetch records for {self.src.display_name}, page {page_num}: {e}",
                status_code=getattr(response, "status_code", None),
                url=url,
                context=ErrorContext(source_name=self.src.display_name, operation="fetch_page"),
                cause=e,
            )
            log.error(
                "❌ PAGINATION_LOOP_REQUEST_ERROR: %s",
                format_error_for_logging(self.last_error),
            )
        except (json.JSONDecodeError, ValueError) as e:
            log.error(
                "❌ PAGINATION_LOOP_JSON_ERROR: Failed to decode JSON for %s, page %d: %s",
                self.src.display_name,
                page_num,
                e,
            )
            if response_obj is not None:
                log.debug("Raw response text for JSON error: %s", response_obj.text[:500])
        except Exception as e_unexpected:
            log.error(
                "❌ PAGINATION_LOOP_UNEXPECTED_ERROR: Unexpected error for %s, page %d: %s",
                self.src.display_name,
                page_num,
                e_unexpected,
                exc_info=True,
            )
        log.error("❌ Breaking from pagination loop; keeping records fetched so far.")
        return None

    def _pagination_loop(self, query_url: str) -> List[Dict[str, Any]]:
        """Return all records, stopping when the provider reports no further offset."""
        records: List[Dict[str, Any]] = []
        offset = ""
        page_num = 1

        while True:
            log.debug("Fetching page %d for %s (offset %r)", page_num, self.src.display_name, offset)

            payload = self._request_page(query_url + quote(offset, safe=""), page_num)
            if payload is None:
                break

            data = self._unwrap(payload) if isinstance(payload, dict) else None
            if not isinstance(data, dict) or "error" in data:
                log.error(
                    "❌ API_ERROR_REPORTED: Error from %s API for %s: %s",
                    self.name,
                    self.src.display_name,
                    data.get("error") if isinstance(data, dict) else payload,
                )
                break

            records.extend(data.get("records") or [])
            self.notifier.notify("fetch_progress", count=len(records))

            offset = data.get("offset") or ""
            if not offset:
                log.debug("🏁 All records retrieved for %s (no offset).", self.src.display_name)
                break

            page_num += 1

        return records
