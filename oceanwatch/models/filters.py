"""Filter specification for report queries."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

ALL = "all"


class DateRange(str, Enum):
    LAST_HOUR = "1h"
    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"
    LAST_90D = "90d"
    CUSTOM = "custom"


class GeoPoint(BaseModel):
    lat: float
    lng: float


class CustomDateRange(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ProximitySpec(BaseModel):
    enabled: bool = False
    center: Optional[GeoPoint] = None
    radius_km: float = 50.0


class FilterSpec(BaseModel):
    """Conjunctive filter. `"all"` disables the type/severity/status/region predicates.

    `date_range` is a plain string: unrecognized values are accepted and
    behave like the 24 hour window.
    """

    type: str = ALL
    severity: str = ALL
    status: str = ALL
    date_range: str = DateRange.LAST_24H.value
    custom_date_range: CustomDateRange = Field(default_factory=CustomDateRange)
    proximity: ProximitySpec = Field(default_factory=ProximitySpec)
    region: str = ALL
