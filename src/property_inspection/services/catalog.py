"""Checklist generation for a property inspection.

The catalog is a pure function of the property attributes: the same inputs
always yield the same ordered list of steps.
"""

from property_inspection.domain.steps import (
    MediaType,
    PropertyFeatures,
    Step,
    StepCategory,
)

WALKAROUND_MAX_SECONDS = 120
DUPLEX_INSERT_INDEX = 2

_IMAGE_PARAMS = "ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600"
_HOUSE_IMAGE = (
    f"https://images.unsplash.com/photo-1564013799919-ab600027ffc6?{_IMAGE_PARAMS}"
)
_LIVING_IMAGE = (
    f"https://images.unsplash.com/photo-1560448204-e02f11c3d0e2?{_IMAGE_PARAMS}"
)
_KITCHEN_IMAGE = (
    f"https://images.unsplash.com/photo-1556911220-bec6e7353275?{_IMAGE_PARAMS}"
)
_BEDROOM_IMAGE = (
    f"https://images.unsplash.com/photo-1616594039964-ae9021a400a0?{_IMAGE_PARAMS}"
)
_BATHROOM_IMAGE = (
    f"https://images.unsplash.com/photo-1584622650111-993a426fbf0a?{_IMAGE_PARAMS}"
)
_UTILITY_IMAGE = (
    f"https://images.unsplash.com/photo-1595514535415-dae8970c1333?{_IMAGE_PARAMS}"
)
_PANEL_IMAGE = (
    f"https://images.unsplash.com/photo-1607977027972-e5681b8d2801?{_IMAGE_PARAMS}"
)
_DAMAGE_IMAGE = (
    f"https://images.unsplash.com/photo-1508230465-73294a882fb9?{_IMAGE_PARAMS}"
)

_EXTERIOR_STEPS: tuple[tuple[str, str, str], ...] = (
    (
        "front-exterior",
        "Front of Property",
        "Take a photo from curb to front door showing the entire front facade, "
        "entrance, and landscaping.",
    ),
    (
        "left-side-exterior",
        "Left Side Exterior",
        "Capture the left side of the property showing the full side wall "
        "and any features.",
    ),
    (
        "right-side-exterior",
        "Right Side Exterior",
        "Capture the right side of the property showing the full side wall "
        "and any features.",
    ),
    (
        "rear-exterior",
        "Rear of Property",
        "Take a photo of the back of the property showing the rear facade "
        "and backyard.",
    ),
    (
        "roof-view",
        "Roof View",
        "Photograph the roof from ground level or ladder if safely accessible "
        "and visible.",
    ),
    (
        "street-view-left",
        "Street View - Facing Left",
        "Take a photo facing left from the property to show the street and "
        "neighborhood context.",
    ),
    (
        "street-view-right",
        "Street View - Facing Right",
        "Take a photo facing right from the property to show the street and "
        "neighborhood context.",
    ),
    (
        "driveway-parking",
        "Driveway / Parking Area",
        "Capture the driveway and parking areas showing condition and capacity.",
    ),
    (
        "front-yard-landscaping",
        "Front Yard Landscaping",
        "Document the front yard landscaping, lawn, and garden areas.",
    ),
    (
        "back-yard-landscaping",
        "Back Yard Landscaping",
        "Document the back yard landscaping, lawn, and garden areas.",
    ),
)

_INTERIOR_STEPS: tuple[tuple[str, str, str, str], ...] = (
    (
        "living-room-wide",
        "Living Room - Wide Shot",
        "Take a wide shot of the living room showing the entire space including "
        "seating areas and windows.",
        _LIVING_IMAGE,
    ),
    (
        "dining-area",
        "Dining Area",
        "Capture the dining area showing the space and any built-in features.",
        _LIVING_IMAGE,
    ),
    (
        "kitchen-wide",
        "Kitchen - Wide Shot",
        "Take a wide shot of the kitchen showing the overall layout, cabinets, "
        "and countertops.",
        _KITCHEN_IMAGE,
    ),
    (
        "kitchen-appliances",
        "Kitchen - Appliances",
        "Document kitchen appliances: refrigerator, stove, dishwasher, and "
        "their condition.",
        _KITCHEN_IMAGE,
    ),
    (
        "kitchen-sink-counters",
        "Kitchen - Sink and Counters",
        "Capture the kitchen sink area and countertops showing condition "
        "and materials.",
        _KITCHEN_IMAGE,
    ),
)

_UTILITY_STEPS: tuple[tuple[str, str, str, str], ...] = (
    (
        "laundry-area",
        "Laundry Area / Washer-Dryer",
        "Document the laundry area and washer/dryer connections or units.",
        _UTILITY_IMAGE,
    ),
    (
        "hvac-water-heater",
        "HVAC Unit / Water Heater",
        "Take photos of HVAC unit and water heater showing model numbers "
        "and condition.",
        _UTILITY_IMAGE,
    ),
    (
        "electrical-panel",
        "Electrical Panel",
        "Photograph the main electrical panel/breaker box clearly, showing all "
        "breakers and panel condition.",
        _PANEL_IMAGE,
    ),
    (
        "visible-damage",
        "Any Visible Damage or Repairs Needed",
        "Document any visible damage, repairs needed, or areas of concern "
        "throughout the property with close-ups.",
        _DAMAGE_IMAGE,
    ),
)

# (suffix, title, description template)
_BATHROOM_PARTS: tuple[tuple[str, str, str], ...] = (
    (
        "wide",
        "Wide Shot",
        "Take a wide shot of bathroom {i} showing all fixtures and overall layout.",
    ),
    (
        "sink-vanity",
        "Sink & Vanity",
        "Capture bathroom {i} sink and vanity area showing condition and storage.",
    ),
    (
        "shower-tub",
        "Shower/Tub",
        "Document bathroom {i} shower or tub area showing fixtures and condition.",
    ),
    (
        "toilet",
        "Toilet",
        "Capture bathroom {i} toilet area showing condition and surrounding space.",
    ),
)


def generate_steps(
    property_type: str | None = "SFR",
    bedrooms: int = 3,
    bathrooms: int = 2,
    features: PropertyFeatures | None = None,
) -> list[Step]:
    """Build the ordered checklist for a property."""
    resolved = features or PropertyFeatures()
    steps = [
        *_exterior_steps(),
        *_interior_steps(),
        *_bedroom_steps(bedrooms),
        *_bathroom_steps(bathrooms),
        *_utility_steps(),
        *_special_steps(resolved),
        _walkaround_step(),
    ]
    if (property_type or "").lower() == "duplex":
        # Positional splice into the assembled list, not a category insert.
        steps[DUPLEX_INSERT_INDEX:DUPLEX_INSERT_INDEX] = _duplex_unit_steps()
    return steps


def _exterior_steps() -> list[Step]:
    return [
        Step(
            id=step_id,
            title=title,
            description=description,
            example_image_url=_HOUSE_IMAGE,
            category=StepCategory.EXTERIOR,
        )
        for step_id, title, description in _EXTERIOR_STEPS
    ]


def _interior_steps() -> list[Step]:
    return [
        Step(
            id=step_id,
            title=title,
            description=description,
            example_image_url=image,
            category=StepCategory.INTERIOR,
        )
        for step_id, title, description, image in _INTERIOR_STEPS
    ]


def _bedroom_steps(count: int) -> list[Step]:
    steps: list[Step] = []
    for i in range(1, count + 1):
        steps.append(
            Step(
                id=f"bedroom-{i}-wide",
                title=f"Bedroom {i} - Wide Shot",
                description=(
                    f"Take a wide shot of bedroom {i} showing the overall layout, "
                    "windows, and space."
                ),
                example_image_url=_BEDROOM_IMAGE,
                category=StepCategory.BEDROOMS,
            )
        )
        steps.append(
            Step(
                id=f"bedroom-{i}-closet",
                title=f"Bedroom {i} - Closet",
                description=(
                    f"Capture bedroom {i} closet if it's walk-in or large, showing "
                    "storage space and condition."
                ),
                example_image_url=_BEDROOM_IMAGE,
                category=StepCategory.BEDROOMS,
            )
        )
    return steps


def _bathroom_steps(count: int) -> list[Step]:
    return [
        Step(
            id=f"bathroom-{i}-{suffix}",
            title=f"Bathroom {i} - {label}",
            description=template.format(i=i),
            example_image_url=_BATHROOM_IMAGE,
            category=StepCategory.BATHROOMS,
        )
        for i in range(1, count + 1)
        for suffix, label, template in _BATHROOM_PARTS
    ]


def _utility_steps() -> list[Step]:
    return [
        Step(
            id=step_id,
            title=title,
            description=description,
            example_image_url=image,
            category=StepCategory.UTILITY,
        )
        for step_id, title, description, image in _UTILITY_STEPS
    ]


def _special_steps(features: PropertyFeatures) -> list[Step]:
    steps: list[Step] = []
    if features.has_garage:
        steps.append(
            Step(
                id="garage-storage",
                title="Garage / Storage Spaces",
                description=(
                    "Document garage and storage areas showing capacity, condition, "
                    "and any built-in features."
                ),
                example_image_url=_UTILITY_IMAGE,
                category=StepCategory.SPECIAL,
            )
        )
    if features.has_basement:
        steps.append(
            Step(
                id="basement-crawlspace",
                title="Basement / Crawl Space",
                description=(
                    "Capture basement or crawl space areas showing structural "
                    "condition and accessibility."
                ),
                example_image_url=_UTILITY_IMAGE,
                category=StepCategory.SPECIAL,
            )
        )
    if features.has_pool:
        steps.append(
            Step(
                id="pool-area",
                title="Pool Area",
                description=(
                    "Document pool area including pool condition, decking, and "
                    "safety features."
                ),
                example_image_url=_HOUSE_IMAGE,
                category=StepCategory.SPECIAL,
            )
        )
    for index, feature in enumerate(features.special_features, start=1):
        steps.append(
            Step(
                id=f"special-feature-{index}",
                title=f"Special Feature - {feature}",
                description=f"Document the {feature} showing its condition and features.",
                example_image_url=_HOUSE_IMAGE,
                category=StepCategory.SPECIAL,
            )
        )
    return steps


def _walkaround_step() -> Step:
    return Step(
        id="property-walkaround",
        title="Property Walkaround Video",
        description=(
            "Record a 2-minute walkthrough video of the entire property, starting "
            "from the front entrance and moving through all main areas. Keep the "
            "video smooth and steady."
        ),
        example_image_url=_HOUSE_IMAGE,
        category=StepCategory.WALKAROUND,
        media_type=MediaType.VIDEO,
        max_duration_seconds=WALKAROUND_MAX_SECONDS,
    )


def _duplex_unit_steps() -> list[Step]:
    return [
        Step(
            id=f"unit-{unit}-entrance",
            title=f"Unit {unit} - Entrance",
            description=(
                f"Take a photo of the entrance to Unit {unit}, showing the door and "
                "any unit-specific features."
            ),
            example_image_url=_HOUSE_IMAGE,
            category=StepCategory.EXTERIOR,
        )
        for unit in (1, 2)
    ]
