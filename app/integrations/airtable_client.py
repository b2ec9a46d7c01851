# app/integrations/airtable_client.py
from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote
import logging

import httpx

from app.modules.employees.errors import LookupFailure, StoreError

logger = logging.getLogger(__name__)


class EmployeeStore(Protocol):
    async def find_active_by_pin(self, pin: str) -> List[Dict[str, Any]]: ...

    async def pin_exists(self, pin: str) -> bool: ...

    async def create_employee(self, fields: Dict[str, Any]) -> Dict[str, Any]: ...

    async def update_employee(self, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]: ...


def _formula_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def pin_formula(pin: str) -> str:
    return f"AND({{pin}}={_formula_string(pin)}, {{actif}})"


def _json_object(r: httpx.Response) -> Optional[Dict[str, Any]]:
    # proxy ou page HTML devant Airtable: 2xx sans JSON exploitable
    try:
        data = r.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _error_body(r: httpx.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return {"error": r.text[:500]}


class AirtableClient:
    def __init__(
        self,
        api_key: str,
        base_id: str,
        table_name: str = "Employees",
        *,
        api_base: str = "https://api.airtable.com/v0",
        timeout: float = 20.0,
        lookup_timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.table_url = f"{api_base.rstrip('/')}/{base_id}/{quote(table_name, safe='')}"
        self._timeout = timeout
        self._lookup_timeout = lookup_timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "AirtableClient":
        return cls(
            settings.AIRTABLE_API_KEY,
            settings.AIRTABLE_BASE_ID,
            settings.AIRTABLE_TABLE_NAME,
            api_base=settings.AIRTABLE_API_BASE,
            timeout=settings.AIRTABLE_TIMEOUT,
            lookup_timeout=settings.PIN_LOOKUP_TIMEOUT,
            **kwargs,
        )

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, headers=self._headers, transport=self._transport)

    async def find_active_by_pin(self, pin: str) -> List[Dict[str, Any]]:
        params = {"filterByFormula": pin_formula(pin), "maxRecords": 1}
        try:
            async with self._client(self._lookup_timeout) as client:
                r = await client.get(self.table_url, params=params)
        except httpx.HTTPError as e:
            raise LookupFailure("pin_lookup_unreachable", {"error": repr(e)}) from e

        if r.status_code >= 400:
            raise LookupFailure("pin_lookup_failed", _error_body(r), status_code=r.status_code)
        data = _json_object(r)
        if data is None or not isinstance(data.get("records", []), list):
            raise LookupFailure("pin_lookup_bad_response", {"body": r.text[:500]}, status_code=r.status_code)
        return data.get("records", [])

    async def pin_exists(self, pin: str) -> bool:
        return len(await self.find_active_by_pin(pin)) > 0

    async def _write(self, method: str, url: str, payload: Dict[str, Any], action: str) -> Dict[str, Any]:
        try:
            async with self._client(self._timeout) as client:
                r = await client.request(method, url, json=payload)
        except httpx.HTTPError as e:
            raise StoreError(f"{action}_unreachable", {"error": repr(e)}) from e

        if r.status_code >= 400:
            raise StoreError(f"{action}_failed", _error_body(r), status_code=r.status_code)
        data = _json_object(r)
        if data is None:
            raise StoreError(f"{action}_bad_response", {"body": r.text[:500]}, status_code=r.status_code)
        return data

    async def create_employee(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        payload = {"records": [{"fields": fields}], "typecast": True}
        data = await self._write("POST", self.table_url, payload, "create_employee")
        records = data.get("records") or []
        if not records:
            raise StoreError("create_employee_empty_response", data)
        return records[0]

    async def update_employee(self, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.table_url}/{quote(record_id, safe='')}"
        return await self._write("PATCH", url, {"fields": fields, "typecast": True}, "update_employee")
