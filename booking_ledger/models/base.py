"""
Base class for records persisted in the JSON data file.

Key design decisions:
- Python attributes are snake_case, the file uses camelCase keys
- Unknown keys are kept (extra="allow") and written back unchanged
- Timestamps are stored as ISO-8601 strings
- A record read with from_record() writes every key it has not changed back
  exactly as it was read ("" stays "", null stays null, ".000Z" stays),
  so a flush only rewrites what actually changed
"""

from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, field_validator
from pydantic.alias_generators import to_camel

R = TypeVar("R", bound="Record")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    # Raw stored keys, and their values as first parsed
    _source: dict[str, Any] = PrivateAttr(default_factory=dict)
    _parsed: dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # The seed files use "" for "not set yet" (e.g. confirmedAt)
        if value == "":
            return None
        return value

    @classmethod
    def from_record(cls: type[R], data: dict[str, Any]) -> R:
        """Parse a stored record, remembering its raw form for write-back."""
        record = cls.model_validate(data)
        record._source = dict(data)
        record._parsed = record.model_dump(mode="json", by_alias=True)
        return record

    def to_record(self) -> dict[str, Any]:
        current = self.model_dump(mode="json", by_alias=True)
        record: dict[str, Any] = {}

        for key, raw in self._source.items():
            if key in current and current[key] == self._parsed.get(key):
                record[key] = raw
            elif current.get(key) is not None:
                record[key] = current[key]

        for key, value in current.items():
            if key not in record and value is not None:
                record[key] = value
        return record
