"""
Base Schema Models for the Claim Signer

Defines the base model that every request, response and chain schema
inherits from. It gives all models the same serialization behaviour:
camelCase wire aliases with snake_case attributes, and a deterministic
canonical JSON form suitable for hashing and logging.

Core Classes:
    - CanonicalModel: RFC8785-style Pydantic base model

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class CanonicalModel(BaseModel):
    """
    Base for every claim signer model: wire aliases in, wire names out.

    Fields declare their wire names through ``Field(alias=...)``; both the
    alias and the attribute name are accepted on input, and ``to_dict()``
    always emits the wire names.

    Example:
        class MyModel(CanonicalModel):
            order_hash: str = Field(..., alias="orderHash")

        model = MyModel(order_hash="0x00")
        model.to_canonical_json()  # '{"orderHash":"0x00"}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Serialize to compact, key-sorted JSON (stable across runs).

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        return json.dumps(
            self.to_dict(),
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to a JSON-compatible dictionary keyed by wire names.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump(mode="json", by_alias=True)
