# src/taskboard/records/client.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from .errors import (
    RecordApiError,
    RecordAuthError,
    RecordConfigError,
    RecordNetworkError,
    RecordNotFoundError,
    RecordValidationError,
)
from .query import Condition, OrderBy

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        msg = data.get("message") or data.get("error")
        if msg:
            return str(msg)
    return f"HTTP {response.status_code}"


def _raise_for_status(response: httpx.Response) -> None:
    code = response.status_code
    if code < 400:
        return

    msg = _error_message(response)
    if code in (401, 403):
        raise RecordAuthError(msg, status_code=code)
    if code == 404:
        raise RecordNotFoundError(msg, status_code=code)
    if code in (400, 422):
        raise RecordValidationError(msg, status_code=code)
    raise RecordApiError(msg, status_code=code)


def _collect_results(table: str, payload: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Bulk responses report success per record.

    Any failed record fails the whole call: callers never see half-applied
    writes silently.
    """
    results = payload.get("results") or []
    failed = [r for r in results if not r.get("success")]
    if failed:
        messages = "; ".join(str(r.get("message") or "unknown error") for r in failed)
        logger.info("Record API: %d/%d %s records failed: %s", len(failed), len(results), table, messages)
        raise RecordValidationError(messages, response_data=payload)
    return [r.get("data") or {} for r in results]


class HttpRecordClient:
    """
    Record API client over HTTP (JSON in, JSON out).

    One pooled httpx.Client per instance. No automatic retries: callers decide
    what to do with a failure (the dashboard shows a notification).
    """

    def __init__(self, settings: Any, *, transport: httpx.BaseTransport | None = None) -> None:
        base_url = str(getattr(settings, "api_base_url", "") or "").strip()
        api_key = str(getattr(settings, "api_key", "") or "").strip()

        if not base_url:
            raise RecordConfigError("Record API base URL is not set. Set TASKBOARD_API_BASE_URL in your .env.")
        if not api_key:
            raise RecordConfigError("Record API key is not set. Set TASKBOARD_API_KEY in your .env.")

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        project_id = str(getattr(settings, "project_id", "") or "").strip()
        if project_id:
            headers["X-Project-Id"] = project_id

        connect_s = float(getattr(settings, "api_connect_timeout", 5.0))
        read_s = float(getattr(settings, "api_read_timeout", 15.0))

        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s),
            transport=transport,
        )
        logger.info("HttpRecordClient ready base_url=%s", base_url)

    def close(self) -> None:
        self._client.close()

    # ---- low-level helpers ----

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RecordNetworkError(f"Record API timeout: {method} {path}") from e
        except httpx.TransportError as e:
            raise RecordNetworkError(f"Record API connection error: {method} {path}") from e

        logger.debug("Record API %s %s -> %s", method, path, response.status_code)
        _raise_for_status(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise RecordApiError("Record API returned invalid JSON", status_code=response.status_code) from e

        if not isinstance(payload, dict):
            raise RecordApiError("Record API returned an unexpected payload", status_code=response.status_code)
        if payload.get("success") is False:
            raise RecordValidationError(
                str(payload.get("message") or "Record API call failed"),
                status_code=response.status_code,
                response_data=payload,
            )
        return payload

    # ---- public API ----

    def fetch_records(
        self,
        table: str,
        *,
        fields: Sequence[str] | None = None,
        where: Sequence[Condition] = (),
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        body: dict[str, Any] = {
            "fields": list(fields or []),
            "where": [c.to_payload() for c in where],
            "orderBy": [o.to_payload() for o in order_by],
        }
        if limit is not None or offset:
            body["pagingInfo"] = {"limit": limit, "offset": int(offset)}

        payload = self._request("POST", f"/tables/{table}/records/fetch", json=body)
        data = payload.get("data") or []
        if not isinstance(data, list):
            raise RecordApiError("Record API returned an unexpected payload")
        return data

    def get_record(
        self,
        table: str,
        record_id: int,
        *,
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any] | None:
        params = {"fields": ",".join(fields)} if fields else None
        try:
            payload = self._request("GET", f"/tables/{table}/records/{int(record_id)}", params=params)
        except RecordNotFoundError:
            return None
        data = payload.get("data")
        return data if isinstance(data, dict) else None

    def create_records(self, table: str, records: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        payload = self._request("POST", f"/tables/{table}/records", json={"records": list(records)})
        return _collect_results(table, payload)

    def update_records(self, table: str, records: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        for r in records:
            if "Id" not in r:
                raise ValueError("update_records: every record needs an Id")
        payload = self._request("PATCH", f"/tables/{table}/records", json={"records": list(records)})
        return _collect_results(table, payload)

    def delete_records(self, table: str, record_ids: Sequence[int]) -> list[int]:
        """Delete by id; returns the ids the backend reports as deleted."""
        ids = [int(i) for i in record_ids]
        if not ids:
            return []
        payload = self._request("DELETE", f"/tables/{table}/records", json={"RecordIds": ids})
        deleted: list[int] = []
        for rid, result in zip(ids, payload.get("results") or [], strict=False):
            if result.get("success"):
                deleted.append(rid)
            else:
                logger.info("Record API: delete %s id=%s failed: %s", table, rid, result.get("message"))
        return deleted
