from dataclasses import dataclass
from datetime import datetime

from .jump_dates import decode_jump_date


class JumpRecord:
    """Domain model for a logged jump - pure business object."""

    def __init__(
        self,
        jump_id: int | None = None,
        jump_number: int | None = None,
        jump_date_raw: int | None = None,
        notes: str | None = None,
        object_id: int | None = None,
        delay_seconds: int | None = None,
        jump_type_id: int | None = None,
        deployment_type_id: int | None = None,
        slider_type_id: int | None = None,
    ):
        self.jump_id = jump_id
        self.jump_number = jump_number
        self.jump_date_raw = jump_date_raw
        self.notes = notes
        self.object_id = object_id
        self.delay_seconds = delay_seconds
        self.jump_type_id = jump_type_id
        self.deployment_type_id = deployment_type_id
        self.slider_type_id = slider_type_id

    @property
    def jump_date_utc(self) -> datetime | None:
        """Jump date decoded from the raw legacy value."""
        return decode_jump_date(self.jump_date_raw)

    def is_new(self) -> bool:
        """Check if the record has not been stored yet."""
        return not self.jump_id

    def has_object(self) -> bool:
        """Check if the jump references an exit object."""
        return self.object_id is not None and self.object_id > 0

    def copy(self, **changes) -> "JumpRecord":
        """Return a copy with the given fields replaced."""
        values = dict(vars(self))
        values.update(changes)
        return JumpRecord(**values)

    def __repr__(self) -> str:
        return f"JumpRecord(jump_id={self.jump_id}, jump_number={self.jump_number})"


class ExitObject:
    """Domain model for an exit object (jump site)."""

    def __init__(
        self,
        object_id: int,
        name: str | None = None,
        region: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        height: int | None = None,
        notes: str | None = None,
    ):
        self.object_id = object_id
        self.name = name
        self.region = region
        self.latitude = latitude
        self.longitude = longitude
        self.height = height
        self.notes = notes

    def has_coordinates(self) -> bool:
        """Check if both coordinates are known."""
        return self.latitude is not None and self.longitude is not None


class JumpType:
    """Domain model for a jump type catalog entry."""

    def __init__(self, jump_type_id: int, name: str | None = None):
        self.jump_type_id = jump_type_id
        self.name = name


class Rig:
    """Domain model for a rig (canopy and container) catalog entry."""

    def __init__(self, rig_id: int, name: str | None = None, notes: str | None = None):
        self.rig_id = rig_id
        self.name = name
        self.notes = notes


@dataclass
class JumpDetails:
    """A jump with its related catalog entries resolved.

    Attributes:
        record: The stored jump
        exit_object: The referenced exit object, if it still exists
        jump_type: The referenced jump type, if it still exists
    """

    record: JumpRecord
    exit_object: ExitObject | None
    jump_type: JumpType | None
