from typing import ClassVar, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict


def has_text(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.strip() != ""


def normalize_code(value: Optional[str], lengths: Iterable[int], field: str) -> Optional[str]:
    """Upper-case an ISO code and check its length. None passes through untouched."""
    if value is None:
        return None
    value = value.strip().upper()
    allowed = tuple(lengths)
    if len(value) not in allowed:
        expected = " or ".join(str(n) for n in allowed)
        raise ValueError(f"{field} must have exactly {expected} characters")
    return value


class Filter(BaseModel):
    """Search options. Unset options do not restrict the result."""

    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class InputModel(BaseModel):
    """Payload of an add or update request."""

    model_config = ConfigDict(extra="ignore")

    # Columns that may not be written as NULL or blank
    required_fields: ClassVar[Tuple[str, ...]] = ()

    def is_property_set(self, name: str) -> bool:
        """True when the client sent the field, even if the value is null."""
        return name in self.model_fields_set

    def is_valid(self) -> bool:
        return all(has_text(getattr(self, name)) for name in self.required_fields)


class UpdateModel(InputModel):
    """Partial update: only fields present in the request are written."""

    def is_valid(self) -> bool:
        if not self.model_fields_set:
            return False
        return all(
            has_text(getattr(self, name))
            for name in self.required_fields
            if self.is_property_set(name)
        )
