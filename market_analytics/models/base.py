"""
Base class for caller-facing result models.

Results use snake_case attributes in Python and serialize with the camelCase
field names callers expect (``marketId``, ``buySellImbalance``, ...). Always
dump with ``by_alias=True``; FastAPI does so for response models.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ResultModel(BaseModel):
    """Frozen result model serialized with camelCase field names."""

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    def to_json(self) -> str:
        """Serialize with caller-facing field names."""
        return self.model_dump_json(by_alias=True)
