"""Minimal Jira REST v2 client with retries and timeout handling."""

from __future__ import annotations

import datetime as dt
import time
from collections.abc import Callable, Mapping, Sequence
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

import requests
import structlog
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from hourglass.config import JiraSettings
from hourglass.exceptions import JiraError, JiraUnavailableError

logger = structlog.get_logger(__name__)

API_PREFIX = "/rest/api/2"
TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def parse_retry_after(headers: Mapping[str, str]) -> float | None:
    """Parse the Retry-After header into a delay (seconds)."""

    retry_after = headers.get("Retry-After")
    if not retry_after:
        return None
    try:
        return float(retry_after)
    except ValueError:
        pass

    try:
        retry_dt = parsedate_to_datetime(retry_after)
        delay = (retry_dt - dt.datetime.now(dt.timezone.utc)).total_seconds()
        return max(0.0, delay)
    except (ValueError, TypeError):
        return None


class JiraClient:
    def __init__(
        self,
        settings: JiraSettings,
        *,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 30,
        max_attempts: int = 3,
        wait_multiplier: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._base_url = settings.url.rstrip("/")
        self._timeout = timeout_seconds
        self._max_attempts = max(1, max_attempts)
        self._backoff = wait_exponential(multiplier=wait_multiplier, max=10)
        self._sleep = sleep
        self._session = session if session is not None else requests.Session()
        self._session.auth = (settings.mail, settings.api_key)
        self._session.headers.update({"Accept": "application/json"})

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _wait(self, retry_state: RetryCallState) -> float:
        """Exponential backoff, stretched to the server's Retry-After when it asks for longer."""

        delay = self._backoff(retry_state)
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, JiraUnavailableError) and exc.retry_after is not None:
            return max(delay, exc.retry_after)
        return delay

    def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        if response.status_code in TRANSIENT_STATUS_CODES:
            raise JiraUnavailableError(
                f"Jira returned {response.status_code} for {method} {url}",
                retry_after=parse_retry_after(response.headers),
            )
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{API_PREFIX}{path}"
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=self._wait,
                retry=retry_if_exception_type(
                    (requests.ConnectionError, requests.Timeout, JiraUnavailableError)
                ),
                reraise=True,
                sleep=self._sleep,
            ):
                with attempt:
                    return self._send(method, url, **kwargs)
        except JiraError:
            logger.warning("jira.request_failed", method=method, path=path)
            raise
        except (requests.RequestException, ValueError) as exc:
            logger.warning("jira.request_failed", method=method, path=path, error=str(exc))
            raise JiraError(f"Jira request {method} {path} failed: {exc}") from exc

    def search_issues(
        self,
        jql: str,
        fields: Sequence[str],
        *,
        expand: str | None = None,
        page_size: int = 100,
    ) -> List[Dict[str, Any]]:
        """Return every issue matching ``jql``, following ``startAt`` pagination."""

        issues: List[Dict[str, Any]] = []
        start_at = 0
        while True:
            params: Dict[str, Any] = {
                "jql": jql,
                "startAt": start_at,
                "maxResults": page_size,
                "fields": ",".join(fields),
            }
            if expand:
                params["expand"] = expand
            page = self._request("GET", "/search", params=params)
            batch = page.get("issues") or []
            issues.extend(batch)
            start_at += len(batch)
            total = page.get("total", start_at)
            if not batch or start_at >= total:
                break
        logger.info("jira.search", jql=jql, issues=len(issues))
        return issues

    def issue_worklogs(self, issue_key: str) -> List[Dict[str, Any]]:
        page = self._request("GET", f"/issue/{issue_key}/worklog")
        return list(page.get("worklogs") or [])

    def add_worklog(self, issue_key: str, time_spent: str, comment: str | None = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"timeSpent": time_spent}
        if comment:
            payload["comment"] = comment
        return self._request("POST", f"/issue/{issue_key}/worklog", json=payload)
