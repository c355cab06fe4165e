"""
Pydantic base model and the response envelope shared by every edge function.
"""
from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    # Unknown response fields are ignored; values are replaced, never mutated
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class GenericError(ApiModel):
    code: Optional[str] = None
    message: str = ""


T = TypeVar("T")


class Envelope(ApiModel, Generic[T]):
    """
    `{error?, data?}` wrapper returned by every function.

    `error` wins when both are populated. `error is None and data is None`
    is the empty-success anomaly and must be treated as a failure by callers.
    """

    error: Optional[GenericError] = None
    data: Optional[T] = None

    @property
    def is_empty(self) -> bool:
        return self.error is None and self.data is None
