"""Hosted-backend store speaking the PostgREST dialect exposed by Supabase."""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from famly import metrics
from famly.errors import ConflictError, StoreError

from .base import Filters, Row, check_table

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION = "23505"


def encode_value(value: Any) -> str:
    """Render a filter value in PostgREST query syntax."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _quote(value: Any) -> str:
    return '"' + encode_value(value).replace('"', '\\"') + '"'


def build_filter_params(filters: Optional[Filters]) -> List[tuple[str, str]]:
    params: List[tuple[str, str]] = []
    for column, expected in (filters or {}).items():
        if isinstance(expected, (list, tuple, set, frozenset)):
            joined = ",".join(_quote(item) for item in expected)
            params.append((column, f"in.({joined})"))
        elif expected is None:
            params.append((column, "is.null"))
        else:
            params.append((column, f"eq.{encode_value(expected)}"))
    return params


def _jsonable(row: Row) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for key, value in row.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, (datetime, date, time)):
            value = value.isoformat()
        payload[key] = value
    return payload


def _error_message(response: httpx.Response) -> tuple[str, Optional[str]]:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    if isinstance(body, dict):
        message = body.get("message") or body.get("msg") or body.get("error") or response.text
        return str(message), body.get("code")
    return response.text, None


class SupabaseStore:
    """Thin PostgREST client; every call is a single request with no retries."""

    backend = "supabase"

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._anon_key = anon_key
        self._access_token = access_token
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            timeout=timeout,
            transport=transport,
        )

    def set_access_token(self, access_token: Optional[str]) -> None:
        """Switch the bearer used for row-level security (None falls back to the anon key)."""
        self._access_token = access_token

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "SupabaseStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._access_token or self._anon_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _request(
        self,
        method: str,
        table: str,
        operation: str,
        *,
        params: Optional[List[tuple[str, str]]] = None,
        json: Any = None,
    ) -> List[Row]:
        check_table(table)
        try:
            response = self._client.request(
                method, f"/{table}", params=params, json=json, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            metrics.STORE_CALLS.labels(
                backend=self.backend, table=table, operation=operation, result="error"
            ).inc()
            logger.warning("Store %s on %s failed: %s", operation, table, exc)
            raise StoreError(str(exc), table=table, operation=operation) from exc

        if response.is_error:
            message, code = _error_message(response)
            metrics.STORE_CALLS.labels(
                backend=self.backend, table=table, operation=operation, result="error"
            ).inc()
            logger.warning(
                "Store %s on %s rejected status=%s message=%s",
                operation,
                table,
                response.status_code,
                message,
            )
            error_cls = (
                ConflictError
                if response.status_code == 409 or code == _UNIQUE_VIOLATION
                else StoreError
            )
            raise error_cls(
                message, table=table, operation=operation, status_code=response.status_code
            )

        metrics.STORE_CALLS.labels(
            backend=self.backend, table=table, operation=operation, result="ok"
        ).inc()
        if not response.content:
            return []
        body = response.json()
        if isinstance(body, dict):
            return [body]
        return list(body)

    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        params = [("select", "*")] + build_filter_params(filters)
        if order_by:
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        return self._request("GET", table, "select", params=params)

    def insert(self, table: str, row: Row) -> Row:
        rows = self._request("POST", table, "insert", json=[_jsonable(row)])
        if not rows:
            raise StoreError("Insert returned no row", table=table, operation="insert")
        return rows[0]

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        if not filters:
            raise StoreError("Refusing to update without filters", table=table, operation="update")
        return self._request(
            "PATCH", table, "update", params=build_filter_params(filters), json=_jsonable(values)
        )

    def delete(self, table: str, filters: Filters) -> int:
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table, operation="delete")
        return len(self._request("DELETE", table, "delete", params=build_filter_params(filters)))


__all__ = ["SupabaseStore", "build_filter_params", "encode_value"]
