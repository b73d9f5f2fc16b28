"""Buyer lead behaviour configuration."""

from typing import Literal

from pydantic import BaseModel, Field

HistoryMode = Literal["atomic", "best_effort"]


class BuyersConfig(BaseModel):
    """Configuration for buyer edits, listing and history."""

    history_mode: HistoryMode = Field(
        default="atomic",
        description=(
            "atomic: history entry is written in the same transaction as the "
            "update. best_effort: written after the update commits; a failed "
            "append is logged and the update still succeeds."
        ),
    )
    default_page_size: int = Field(default=10, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1)
    history_page_size: int = Field(
        default=5,
        ge=1,
        le=100,
        description="History entries returned when no limit is given",
    )
