"""Maintenance type catalog.

The fixed set of maintenance types a user can log or schedule, with a
suggested cadence used as a default when an interval is created without
explicit thresholds. The due calculator never reads this catalog.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class MaintenanceTypeInfo:
    """A maintenance type and its suggested cadence."""
    name: str
    description: str
    suggested_prints: Optional[int] = None  # Prints between services
    suggested_hours: Optional[float] = None  # Print hours between services
    instructions: List[str] = field(default_factory=list)

    @property
    def has_suggestion(self) -> bool:
        return self.suggested_prints is not None or self.suggested_hours is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "suggested_prints": self.suggested_prints,
            "suggested_hours": self.suggested_hours,
            "instructions": list(self.instructions),
        }


NOZZLE_CLEAN = "Nozzle Clean"
BED_LEVEL = "Bed Level"
LUBRICATION = "Lubrication"
FIRMWARE_UPDATE = "Firmware Update"
GENERAL_INSPECTION = "General Inspection"
OTHER = "Other"

MAINTENANCE_TYPES: List[MaintenanceTypeInfo] = [
    MaintenanceTypeInfo(
        name=NOZZLE_CLEAN,
        description="Clean nozzle and clear partial clogs",
        suggested_prints=20,
        suggested_hours=50,
        instructions=[
            "Heat nozzle to printing temperature",
            "Wipe the tip with a brass brush",
            "Perform a cold pull if extrusion is weak",
        ],
    ),
    MaintenanceTypeInfo(
        name=BED_LEVEL,
        description="Level the bed and re-check first layer",
        suggested_prints=10,
        instructions=[
            "Clean the bed with isopropyl alcohol",
            "Run the leveling routine",
            "Print a first layer test",
        ],
    ),
    MaintenanceTypeInfo(
        name=LUBRICATION,
        description="Lubricate rods, rails and lead screws",
        suggested_hours=100,
        instructions=[
            "Wipe off old lubricant",
            "Apply a thin layer of lubricant",
            "Move every axis through its full range",
        ],
    ),
    MaintenanceTypeInfo(
        name=FIRMWARE_UPDATE,
        description="Check for and apply firmware updates",
        suggested_hours=500,
    ),
    MaintenanceTypeInfo(
        name=GENERAL_INSPECTION,
        description="Inspect belts, fans, cables and fittings",
        suggested_hours=200,
        instructions=[
            "Check belt tension",
            "Clean cooling fans",
            "Look for worn cables and loose connectors",
        ],
    ),
    MaintenanceTypeInfo(
        name=OTHER,
        description="Any other maintenance task",
    ),
]

_BY_NAME: Dict[str, MaintenanceTypeInfo] = {t.name: t for t in MAINTENANCE_TYPES}


def maintenance_type_names() -> List[str]:
    """Catalog names in display order."""
    return [t.name for t in MAINTENANCE_TYPES]


def is_known_type(name: str) -> bool:
    """Check a maintenance type against the catalog."""
    return name in _BY_NAME


def get_type_info(name: str) -> Optional[MaintenanceTypeInfo]:
    """Look up a catalog entry by name."""
    return _BY_NAME.get(name)
