from datetime import date

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import InvalidInputError
from .jump_dates import encode_jump_date
from .models import JumpRecord


class JumpForm(BaseModel):
    """Schema for user-entered jump data.

    Validates what the jump editor collects before it is turned into a
    JumpRecord and handed to the numbering resolver.

    Example:
        ```python
        form = JumpForm(jump_number="42", jump_date="2016-05-14", notes=" Exit ok ")
        record = form.to_record()
        ```

    Attributes:
        jump_number: User-visible jump number, positive when given
        jump_date: Calendar date of the jump
        notes: Free text, blank collapses to None
        object_id: Exit object foreign key
        delay_seconds: Freefall delay in seconds
        jump_type_id: Jump type foreign key
        deployment_type_id: Deployment type foreign key
        slider_type_id: Slider configuration foreign key
    """

    jump_number: int | None = Field(
        default=None,
        ge=1,
        description="User-visible jump number",
        examples=[42],
    )
    jump_date: date | None = Field(
        default=None,
        description="Calendar date of the jump",
        examples=["2016-05-14"],
    )
    notes: str | None = Field(default=None, description="Free text notes")
    object_id: int | None = Field(default=None, ge=1)
    delay_seconds: int | None = Field(default=None, ge=0)
    jump_type_id: int | None = Field(default=None, ge=1)
    deployment_type_id: int | None = Field(default=None, ge=1)
    slider_type_id: int | None = Field(default=None, ge=1)

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @classmethod
    def parse(cls, **data) -> "JumpForm":
        """Validate raw input, raising InvalidInputError on the first problem."""
        try:
            return cls(**data)
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "form"
            raise InvalidInputError(field, error["msg"]) from e

    @classmethod
    def from_record(cls, record: JumpRecord) -> "JumpForm":
        """Build a form pre-filled from a stored jump."""
        jump_date = record.jump_date_utc
        return cls(
            jump_number=record.jump_number,
            jump_date=jump_date.date() if jump_date else None,
            notes=record.notes,
            object_id=record.object_id,
            delay_seconds=record.delay_seconds,
            jump_type_id=record.jump_type_id,
            deployment_type_id=record.deployment_type_id,
            slider_type_id=record.slider_type_id,
        )

    def to_record(self, jump_id: int | None = None) -> JumpRecord:
        """Convert to a JumpRecord, encoding the date in the legacy format."""
        return JumpRecord(
            jump_id=jump_id,
            jump_number=self.jump_number,
            jump_date_raw=(
                encode_jump_date(self.jump_date) if self.jump_date else None
            ),
            notes=self.notes,
            object_id=self.object_id,
            delay_seconds=self.delay_seconds,
            jump_type_id=self.jump_type_id,
            deployment_type_id=self.deployment_type_id,
            slider_type_id=self.slider_type_id,
        )
