"""
Ingestion boundary for business records.

Raw rows from collectors (JSON objects or CSV rows) are validated here
before they reach the engine. The engine itself assumes well-formed
records and never raises on their content.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from processing.chain_resolution.models import BusinessRecord, Coordinates

logger = logging.getLogger(__name__)


class RecordValidationError(ValueError):
    """Raised when a raw row cannot be turned into a BusinessRecord."""

    def __init__(self, message: str, row: Optional[dict] = None):
        super().__init__(message)
        self.row = row


class BusinessRecordIn(BaseModel):
    """Schema for an incoming business record."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    website: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="before")
    @classmethod
    def flatten_coordinates(cls, data: Any) -> Any:
        """Accept {"coordinates": {"lat": .., "lng": ..}} as well as flat fields."""
        if isinstance(data, dict) and isinstance(data.get("coordinates"), dict):
            data = dict(data)
            coords = data.pop("coordinates")
            data.setdefault("latitude", coords.get("lat"))
            data.setdefault("longitude", coords.get("lng"))
        return data

    @field_validator("id", "name", mode="before")
    @classmethod
    def strip_required(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            value = str(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator(
        "phone", "address", "city", "state", "website", "latitude", "longitude",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        """CSV exports use empty strings for missing values."""
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @model_validator(mode="after")
    def coordinates_paired(self) -> "BusinessRecordIn":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self

    def to_record(self) -> BusinessRecord:
        coordinates = None
        if self.latitude is not None and self.longitude is not None:
            coordinates = Coordinates(lat=self.latitude, lng=self.longitude)
        return BusinessRecord(
            id=self.id,
            name=self.name,
            phone=self.phone,
            address=self.address,
            city=self.city,
            state=self.state,
            website=self.website,
            coordinates=coordinates,
        )


def parse_record(row: dict) -> BusinessRecord:
    """
    Validate one raw row.

    Raises:
        RecordValidationError: if required fields are missing or malformed
    """
    try:
        return BusinessRecordIn.model_validate(row).to_record()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        raise RecordValidationError(f"Invalid business record: {problems}", row) from e


def parse_records(
    rows: Iterable[dict],
    strict: bool = True,
) -> tuple[list[BusinessRecord], list[RecordValidationError]]:
    """
    Validate a batch of raw rows.

    Identifiers must be unique within a batch.

    Args:
        rows: Raw dicts from JSON or CSV
        strict: Raise on the first bad row instead of skipping it

    Returns:
        Tuple of (records, rejected) where rejected holds the errors for
        skipped rows (always empty when strict)
    """
    records: list[BusinessRecord] = []
    rejected: list[RecordValidationError] = []
    seen_ids: set[str] = set()

    for line, row in enumerate(rows, start=1):
        try:
            record = parse_record(row)
            if record.id in seen_ids:
                raise RecordValidationError(f"Duplicate record id: {record.id}", row)
        except RecordValidationError as e:
            if strict:
                raise
            logger.warning(f"Skipping row {line}: {e}")
            rejected.append(e)
            continue

        seen_ids.add(record.id)
        records.append(record)

    return records, rejected


def load_records(
    path: Union[str, Path],
    strict: bool = True,
) -> tuple[list[BusinessRecord], list[RecordValidationError]]:
    """
    Load and validate records from a .json (list of objects) or .csv file.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise RecordValidationError(f"{path} must contain a JSON list of records")
        if not all(isinstance(r, dict) for r in rows):
            raise RecordValidationError(f"{path} must contain only JSON objects")
    elif suffix == ".csv":
        with open(path, "r", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
    else:
        raise ValueError(f"Unsupported record file type: {path.suffix}")

    records, rejected = parse_records(rows, strict=strict)
    logger.info(f"Loaded {len(records)} records from {path} ({len(rejected)} rejected)")
    return records, rejected
