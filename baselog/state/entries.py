from dataclasses import dataclass
from datetime import datetime

from ..domain.jump_dates import format_local_date
from ..domain.models import ExitObject, JumpRecord
from .observable import ObservableObject, ObservableProperty

HYDRATED_FIELDS = (
    "exit_name",
    "location_name",
    "latitude",
    "longitude",
    "has_coordinates",
    "thumbnail",
)


@dataclass(frozen=True)
class HydrationResult:
    """Related data fetched for one jump.

    Attributes:
        exit_object: The referenced exit object, None when absent or unreadable
        thumbnail: First image of the exit object, None when there is none
    """

    exit_object: ExitObject | None = None
    thumbnail: bytes | None = None

    @classmethod
    def empty(cls) -> "HydrationResult":
        return cls()


class JumpViewEntry(ObservableObject):
    """A jump as shown in the list, enriched with exit object data.

    Entries live for one load cycle; generation identifies that cycle so
    late hydration results from an older load can be recognised and dropped.
    """

    is_expanded = ObservableProperty(default=False)

    def __init__(self, record: JumpRecord, generation: int = 0):
        super().__init__()
        self.record = record
        self.generation = generation
        self.exit_name = ""
        self.location_name = ""
        self.latitude: float | None = None
        self.longitude: float | None = None
        self.thumbnail: bytes | None = None
        self.is_hydrated = False

    @property
    def jump_id(self) -> int:
        return self.record.jump_id

    @property
    def jump_number(self) -> int | None:
        return self.record.jump_number

    @property
    def notes(self) -> str | None:
        return self.record.notes

    @property
    def jump_date_utc(self) -> datetime | None:
        return self.record.jump_date_utc

    @property
    def date_text(self) -> str:
        """Jump date as displayed, in local time."""
        return format_local_date(self.jump_date_utc)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail)

    def apply_hydration(self, result: HydrationResult) -> None:
        """Fill the exit and thumbnail fields and notify exactly those fields."""
        exit_object = result.exit_object
        self.exit_name = (exit_object.name or "") if exit_object else ""
        self.location_name = (exit_object.region or "") if exit_object else ""
        self.latitude = exit_object.latitude if exit_object else None
        self.longitude = exit_object.longitude if exit_object else None
        self.thumbnail = result.thumbnail or None
        self.is_hydrated = True
        self.notify_property_changed(*HYDRATED_FIELDS)

    def __repr__(self) -> str:
        return (
            f"JumpViewEntry(jump_id={self.jump_id}, jump_number={self.jump_number}, "
            f"generation={self.generation})"
        )
