from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

class Command(Enum):
    """Text commands recognised instead of a measurement."""
    FETCH_HISTORY = "get"

@dataclass(frozen=True)
class MeasurementRecord:
    """One body measurement as sent in a single message."""
    date: date
    weight: float
    body_fat: Optional[float] = None # %
    body_water: Optional[float] = None # %
    body_muscle: Optional[float] = None # kg
