"""Activity log use cases"""
from .list_activity_logs import ListActivityLogs
from .dtos import ListActivityLogsQueryDTO

__all__ = [
    "ListActivityLogs",
    "ListActivityLogsQueryDTO",
]
