"""HTTP session setup for provider requests."""

from __future__ import annotations

import logging

import requests
from requests.adapters import HTTPAdapter

log = logging.getLogger(__name__)


def create_session(api_key: str, *, user_agent: str = "tablefetch/0.1 (requests)") -> requests.Session:
    """Return a session carrying the bearer token.

    Transport retries are switched off: a failed page ends pagination.
    """
    session = requests.Session()

    adapter = HTTPAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update(
        {
            "Authorization": f"Bearer {api_key}",
            "User-Agent": user_agent,
            "Accept": "application/json",
        }
    )
    log.debug("Created HTTP session (key set: %s)", bool(api_key))
    return session
