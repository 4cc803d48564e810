"""Settings Repository Interface"""

from abc import ABC, abstractmethod

from src.domain.settings import CompanySettings


class SettingsRepository(ABC):
    """Repository interface for company settings (key/value rows)"""

    @abstractmethod
    async def get_company_settings(self) -> CompanySettings:
        """Current settings; defaults when the table is empty or unreadable"""
        pass

    @abstractmethod
    async def update_company_settings(self, patch: dict) -> CompanySettings:
        """
        Merge ``patch`` into the current settings and rewrite the block

        Args:
            patch: Field name -> new value (unknown keys are ignored)

        Returns:
            The stored CompanySettings
        """
        pass
