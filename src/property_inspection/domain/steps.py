"""Domain models for the inspection checklist."""

from dataclasses import dataclass, field
from enum import Enum


class StepCategory(str, Enum):
    """Grouping used for display and next-step sequencing."""

    EXTERIOR = "exterior"
    INTERIOR = "interior"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"
    UTILITY = "utility"
    SPECIAL = "special"
    WALKAROUND = "walkaround"


class MediaType(str, Enum):
    """Kind of capture a step expects or an artifact holds."""

    PHOTO = "photo"
    VIDEO = "video"


@dataclass(frozen=True)
class Step:
    """A single required capture in the checklist."""

    id: str
    title: str
    description: str
    example_image_url: str
    category: StepCategory
    media_type: MediaType | None = None
    max_duration_seconds: int | None = None


@dataclass(frozen=True)
class PropertyFeatures:
    """Optional property attributes that add special steps."""

    has_pool: bool = False
    has_basement: bool = False
    has_garage: bool = False
    special_features: tuple[str, ...] = field(default_factory=tuple)
