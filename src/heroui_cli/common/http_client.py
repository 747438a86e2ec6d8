"""Shared HTTP helpers used by the registry client.

Encapsulates request/timeout error handling and retries so callers only
deal with a status code and parsed body.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from ..constants import Constants
from .logging_utils import Timer, extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform GET request with timeout and retries.

    Returns:
        Tuple of (status_code, headers_dict, text). A status code of 0 means
        every attempt failed at the transport level; text then holds the reason.
    """
    safe_target = safe_url(url)
    last_exception = None

    for attempt in range(Constants.HTTP_RETRY_MAX):
        with Timer() as t:
            try:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1
                        )
                    )

                response = requests.get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=headers,
                    **kwargs
                )

                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP response",
                        extra=extra_context(
                            event="http_response",
                            component="http_client",
                            action="GET",
                            status_code=response.status_code,
                            duration_ms=t.duration_ms(),
                            target=safe_target
                        )
                    )
                if response.status_code >= 500 and attempt + 1 < Constants.HTTP_RETRY_MAX:
                    last_exception = f"HTTP {response.status_code}"
                    continue
                return response.status_code, dict(response.headers), response.text

            except requests.Timeout:
                last_exception = "timeout"
                logger.debug(
                    "HTTP timeout",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        outcome="timeout",
                        attempt=attempt + 1,
                        target=safe_target
                    )
                )
                continue
            except requests.RequestException as exc:
                last_exception = str(exc)
                logger.debug(
                    "HTTP request exception",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        outcome="request_exception",
                        attempt=attempt + 1,
                        target=safe_target
                    )
                )
                continue

    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {last_exception}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)

    if status_code == 200 and text:
        try:
            return status_code, response_headers, json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Couldn't decode JSON from %s", safe_url(url))
            return status_code, response_headers, None

    return status_code, response_headers, None
