"""Spreadsheet Client Interface

Defines the contract for the remote spreadsheet calls the store is built
from. Ranges use A1 notation (``Clients!A2:K``) and all cell values are
strings.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class SheetsClient(ABC):
    """
    Raw remote spreadsheet operations

    Implementations raise transport/HTTP exceptions as-is; classification
    and retries happen in the executor that wraps every call.
    """

    @abstractmethod
    async def get_spreadsheet(self) -> Dict[str, Any]:
        """
        Fetch spreadsheet metadata

        Returns:
            Dict with a ``sheets`` list, each item holding
            ``properties.title`` and ``properties.sheetId``
        """
        pass

    @abstractmethod
    async def get_values(self, range_: str) -> List[List[str]]:
        """
        Read a range

        Returns:
            Rows of cell strings; trailing blank cells and rows may be omitted
        """
        pass

    @abstractmethod
    async def update_values(self, range_: str, values: List[List[str]]) -> None:
        """Overwrite a range with the given rows"""
        pass

    @abstractmethod
    async def append_values(self, range_: str, values: List[List[str]]) -> None:
        """Append rows after the last non-empty row of the table"""
        pass

    @abstractmethod
    async def clear_values(self, range_: str) -> None:
        """Blank out a range without shifting rows"""
        pass

    @abstractmethod
    async def batch_update(self, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Apply structural changes (addSheet, deleteDimension, ...)

        Args:
            requests: Sheets API request objects applied in order

        Returns:
            Raw API response
        """
        pass

    async def close(self) -> None:
        """Release transport resources"""
        return None
