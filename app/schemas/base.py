from typing import Any, ClassVar, FrozenSet

from pydantic import BaseModel, model_validator


class PartialUpdate(BaseModel):
    """
    Base for partial-update payloads.

    Fields named in ``non_nullable`` back NOT NULL columns: they may be
    omitted, but an explicit null is a validation error.
    """
    non_nullable: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def reject_explicit_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = sorted(name for name in cls.non_nullable if name in data and data[name] is None)
            if nulls:
                raise ValueError(f"null is not allowed for: {', '.join(nulls)}")
        return data
