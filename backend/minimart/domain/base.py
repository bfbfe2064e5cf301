"""
Shared base for domain models
"""
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict


def decimals_to_float(value: Any) -> Any:
    """Recursively convert Decimal values to float for JSON compatibility"""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {key: decimals_to_float(item) for key, item in value.items()}
    if isinstance(value, list):
        return [decimals_to_float(item) for item in value]
    return value


class DomainModel(BaseModel):
    """Read model mapped from a table row; unknown columns are ignored"""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    def to_dict(self) -> dict:
        return decimals_to_float(self.model_dump(mode="python"))


class WriteSchema(BaseModel):
    """Create/update payload; validated before any remote call"""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")
