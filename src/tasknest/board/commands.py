"""Pydantic models for create/edit commands coming from the interaction layer."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..errors import BoardValidationError

M = TypeVar("M", bound=BaseModel)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _require_text(value: str, label: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError(f"{label} must be non-empty")
    return text


class TaskDraft(BaseModel):
    """A new task as typed into the task form."""

    title: str
    deadline: Optional[date] = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _require_text(value, "title")

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline(cls, value: Any) -> Any:
        return _blank_to_none(value)


class TaskEdit(BaseModel):
    """A partial edit; only fields the caller passed are applied.

    Passing ``deadline=None`` (or an empty string) clears the deadline,
    omitting it leaves the deadline untouched. Unknown fields are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    deadline: Optional[date] = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("title must be non-empty")
        return _require_text(value, "title")

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def changes(self) -> dict[str, Any]:
        """Field changes ready for the store (deadline as an ISO string)."""
        out: dict[str, Any] = {}
        if "title" in self.model_fields_set:
            out["title"] = self.title
        if "deadline" in self.model_fields_set:
            out["deadline"] = self.deadline.isoformat() if self.deadline else None
        return out


class FolderDraft(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _require_text(value, "name")


def parse_command(model: type[M], **data: Any) -> M:
    """Validate *data* against *model*, raising :class:`BoardValidationError`."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise BoardValidationError(errors) from exc
