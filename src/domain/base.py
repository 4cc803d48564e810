"""Shared domain base model and helpers"""

import secrets
import time
from datetime import datetime, timezone

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, field_validator


class BaseModel(PydanticBaseModel):
    """Base class for all domain entities stored as spreadsheet rows"""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="after")
    @classmethod
    def _assume_utc(cls, value):
        # Naive datetimes are treated as UTC so comparisons never mix kinds
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def generate_id() -> str:
    """
    Generate an opaque entity id from the current time plus random bits

    Ids are never supplied by callers, so two rows can only collide if the
    millisecond clock and 32 random bits both match.
    """
    return f"{int(time.time() * 1000):x}{secrets.token_hex(4)}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
