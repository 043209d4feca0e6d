"""
Base model for rows loaded from PostgreSQL.

psycopg hands back uuid.UUID and Decimal values; API payloads and the
conversation id scheme work with plain strings and floats, so rows are
normalised once here before field validation.
"""

import uuid
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _normalise_db_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalised = {}
        for key, value in data.items():
            if isinstance(value, uuid.UUID):
                value = str(value)
            elif isinstance(value, Decimal):
                value = float(value)
            normalised[key] = value
        return normalised
