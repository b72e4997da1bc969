"""Domain entities - core business objects."""
import math
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from tracker.services.date_normalizer import parse_instant, to_iso_string

AlertType = Literal["info", "success", "error", "warning"]


def _required_text(value: Optional[str], field: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValueError(f"{field} is required")
    return text


def _optional_iso_date(value) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if parse_instant(value) is None:
        raise ValueError(f"invalid date: {value!r}")
    return to_iso_string(value)


class Dataset(BaseModel):
    """Tracked metric as delivered by the backend."""
    id: Optional[int] = None
    name: str
    description: str = ""
    symbol: str = ""
    target_value: Optional[float] = Field(default=None, alias="targetValue")
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")

    class Config:
        from_attributes = True
        populate_by_name = True


class DatasetCreate(BaseModel):
    """DTO for creating or updating a dataset."""
    name: str = Field(max_length=255)
    description: str = Field(default="", max_length=2000)
    symbol: str = Field(max_length=50)
    target_value: Optional[float] = Field(default=None, alias="targetValue")
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")

    class Config:
        populate_by_name = True

    @field_validator("name", "symbol", mode="before")
    @classmethod
    def _strip_required(cls, value, info):
        return _required_text(value, info.field_name)

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value):
        return "" if value is None else str(value).strip()

    @field_validator("target_value", mode="before")
    @classmethod
    def _blank_target(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _iso_dates(cls, value):
        return _optional_iso_date(value)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class Entry(BaseModel):
    """One recorded (or projected) value of a dataset."""
    id: Optional[int] = None
    dataset_id: Optional[int] = Field(default=None, alias="datasetId")
    value: float
    label: str = ""
    date: str = ""
    projected: bool = False

    class Config:
        from_attributes = True
        populate_by_name = True


class EntryCreate(BaseModel):
    """DTO for creating or updating an entry."""
    id: Optional[int] = None
    dataset_id: Optional[int] = Field(default=None, alias="datasetId")
    value: float
    label: str
    date: str

    class Config:
        populate_by_name = True

    @field_validator("value")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("value must be finite")
        return value

    @field_validator("label", mode="before")
    @classmethod
    def _strip_label(cls, value):
        return _required_text(value, "label")

    @field_validator("date", mode="before")
    @classmethod
    def _iso_date(cls, value):
        iso = _optional_iso_date(value)
        if iso is None:
            raise ValueError("date is required")
        return iso

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class AlertEvent(BaseModel):
    """Transient user notification."""
    severity: AlertType = "info"
    message: str


class DialogRequest(BaseModel):
    """Yes/no confirmation prompt."""
    header: str = "Message"
    message: str = ""
    left_button_text: str = "Cancel"
    right_button_text: str = "OK"


class DialogResult(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class ChartPoint(BaseModel):
    x: datetime
    y: float


class ChartSeries(BaseModel):
    """Named, ordered point sequence."""
    name: str
    points: List[ChartPoint] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)


class RobustRange(BaseModel):
    """Vertical axis bounds desensitized to outliers."""
    min: float
    max: float


class CopyResult(BaseModel):
    """Outcome of copying a dataset and its entries."""
    dataset_id: int
    copied: int = 0
    total: int = 0
    source_unavailable: bool = False

    @property
    def complete(self) -> bool:
        return not self.source_unavailable and self.copied == self.total


class NavItem(BaseModel):
    """Sidebar navigation item."""
    route: str
    icon: str
    label: str
