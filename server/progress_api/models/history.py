"""Wellness check-in models."""
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CheckIn(BaseModel):
    """
    One submitted check-in.

    Answers may arrive under ``indicators`` or under the intake form's
    ``responses`` key. Values are validated by the report engine, not here,
    so malformed answers surface as engine errors naming the entry.
    """

    model_config = ConfigDict(populate_by_name=True)

    timestamp: Optional[str] = None
    indicators: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("indicators", "responses"),
    )


class CheckInRecord(CheckIn):
    """A check-in as held by the history store."""

    id: int
    user_id: str = Field(serialization_alias="userId")
