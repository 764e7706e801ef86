from enum import Enum
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ForecastKind(str, Enum):
    FULL = "full"
    ABBREVIATED = "abbreviated"


class ForecastSlot(BaseModel):
    """
    One persisted forecast variant.

    The slot only knows where its text lives; the text itself is read from
    storage every cycle and never cached here.
    """

    model_config = ConfigDict(frozen=True)

    kind: ForecastKind
    path: Path


class ForecastObservation(BaseModel):
    """Text fetched for one slot during the current cycle."""

    kind: ForecastKind
    text: str


class CycleResult(BaseModel):
    """What a single poll cycle did."""

    bootstrapped: List[ForecastKind] = Field(default_factory=list)
    written: List[ForecastKind] = Field(default_factory=list)
    chunks_sent: int = 0
