"""httpx Sheets API Client

Implements SheetsClient against the Google Sheets v4 REST API using a
bearer token obtained by the (external) session provider.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from src.app.services.sheets_client import SheetsClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"


class HttpxSheetsClient(SheetsClient):
    """
    Sheets REST client

    Non-2xx responses raise ``httpx.HTTPStatusError``; connection problems
    raise ``httpx.TransportError``. Both are classified by the executor.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client

        Args:
            spreadsheet_id: Target spreadsheet
            access_token: OAuth bearer token
            base_url: Sheets API spreadsheets endpoint
            timeout: Transport timeout in seconds
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        self.spreadsheet_id = spreadsheet_id
        self._spreadsheet_url = f"{base_url.rstrip('/')}/{spreadsheet_id}"
        self._http = httpx.AsyncClient(
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    @staticmethod
    def _range_path(range_: str) -> str:
        return quote(range_, safe="")

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        response = await self._http.request(method, self._spreadsheet_url + url, **kwargs)
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    async def get_spreadsheet(self) -> Dict[str, Any]:
        return await self._request(
            "GET", "", params={"fields": "sheets.properties(sheetId,title)"}
        )

    async def get_values(self, range_: str) -> List[List[str]]:
        body = await self._request("GET", f"/values/{self._range_path(range_)}")
        return body.get("values", [])

    async def update_values(self, range_: str, values: List[List[str]]) -> None:
        await self._request(
            "PUT",
            f"/values/{self._range_path(range_)}",
            params={"valueInputOption": "RAW"},
            json={"range": range_, "majorDimension": "ROWS", "values": values},
        )

    async def append_values(self, range_: str, values: List[List[str]]) -> None:
        await self._request(
            "POST",
            f"/values/{self._range_path(range_)}:append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"majorDimension": "ROWS", "values": values},
        )

    async def clear_values(self, range_: str) -> None:
        await self._request("POST", f"/values/{self._range_path(range_)}:clear", json={})

    async def batch_update(self, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self._request("POST", ":batchUpdate", json={"requests": requests})

    async def close(self) -> None:
        await self._http.aclose()
        logger.debug(f"Closed Sheets client for spreadsheet {self.spreadsheet_id}")
