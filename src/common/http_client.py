"""Shared HTTP helpers used by the repository version sources.

Encapsulates common request/timeout error handling so strategy modules avoid
duplicating try/except blocks. Responses are never cached here: every
lookup is computed fresh and caching is left to callers.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


class HttpFetchError(Exception):
    """Raised when the transport fails before any response arrives."""


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "central").
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object.

    Raises:
        HttpFetchError: On timeouts and connection errors.
    """
    safe_target = safe_url(url)
    kwargs.setdefault("timeout", Constants.REQUEST_TIMEOUT)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, **kwargs)
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        outcome="success" if res.status_code == 200 else "handled_non_2xx",
                        status_code=res.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                        context=context
                    )
                )
            return res
        except requests.Timeout as exc:
            raise HttpFetchError(f"{context} request timed out after {kwargs['timeout']} seconds") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise HttpFetchError(f"{context} connection error: {exc}") from exc


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    context: str = "http",
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform GET request with timeout and retries, never raising.

    Returns:
        Tuple of (status_code, headers_dict, body_text). Transport failures
        are reported as status 0 with the failure reason as the body.
    """
    last_exception = None
    for attempt in range(max(1, Constants.HTTP_RETRY_MAX)):
        try:
            response = safe_get(url, context=context, headers=headers, **kwargs)
            return response.status_code, dict(response.headers), response.text
        except HttpFetchError as exc:
            last_exception = str(exc)
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request exception",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        action="GET",
                        outcome="request_exception",
                        attempt=attempt + 1,
                        target=safe_url(url),
                        context=context
                    )
                )

    return 0, {}, f"Request failed after {max(1, Constants.HTTP_RETRY_MAX)} attempts: {last_exception}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    context: str = "http",
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response with DEBUG traces.

    Args:
        url: Target URL
        headers: Optional request headers
        context: Source tag for logs
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(url, headers=headers, context=context, **kwargs)

    if status_code == 200 and text:
        try:
            return status_code, response_headers, json.loads(text)
        except json.JSONDecodeError:
            if is_debug_enabled(logger):
                logger.debug(
                    "JSON decode error",
                    extra=extra_context(
                        event="parse",
                        component="http_client",
                        action="get_json",
                        outcome="json_decode_error",
                        status_code=status_code,
                        target=safe_url(url)
                    )
                )
            return status_code, response_headers, None

    return status_code, response_headers, None
