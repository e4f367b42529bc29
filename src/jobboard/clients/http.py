# src/jobboard/clients/http.py

"""
Plain-function HTTP helpers for talking to Google Sheets.

Design goals:
- Keep *all* transport details here (timeouts, retries, headers) so the
  data-source module only builds URLs and interprets payloads.
- Return raw text / JSON; parsing happens in the pipeline.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


def _default_headers() -> Dict[str, str]:
    return {"User-Agent": "jobboard/0.1"}


@retry(
    # 1s, 2s, 4s ... capped at 16s; at most 5 attempts
    wait=wait_exponential(min=1, max=16),
    stop=stop_after_attempt(5),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
def _get(url: str, params: Optional[Dict[str, str]], timeout: float) -> httpx.Response:
    # follow_redirects: published sheet URLs bounce through googleusercontent.com
    with httpx.Client(timeout=timeout, headers=_default_headers(), follow_redirects=True) as client:
        resp = client.get(url, params=params)
        resp.raise_for_status()  # httpx.HTTPStatusError for 4xx/5xx, not retried
        return resp


def get_text(url: str, params: Optional[Dict[str, str]] = None, *, timeout: float = 20) -> str:
    """GET `url` and return the body as text."""
    logger.debug("GET %s", url)
    return _get(url, params, timeout).text


def get_json(url: str, params: Optional[Dict[str, str]] = None, *, timeout: float = 20) -> Any:
    """GET `url` and return the decoded JSON body."""
    logger.debug("GET %s (json)", url)
    return _get(url, params, timeout).json()
