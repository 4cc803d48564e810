from .sheets_client import SheetsClient
from .activity_logger import ActivityLogger, ActivityType

__all__ = [
    "SheetsClient",
    "ActivityLogger",
    "ActivityType",
]
