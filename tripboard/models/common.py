"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for records exchanged with backend collaborators.

    Accepts the backend's camelCase keys and snake_case field names alike.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ActivityCategory(str, Enum):
    """Category of a day activity record."""

    lodging = "lodging"
    attraction = "attraction"
    transport = "transport"


class BookingStatus(str, Enum):
    """Canonical booking item status."""

    confirmed = "confirmed"
    pending = "pending"
    failed = "failed"
    other = "other"
