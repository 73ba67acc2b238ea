"""Report metadata value objects.

These carry the machine, customer and inspector details collected by the
inspection flow. Scoring never reads them.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InspectorContext:
    """Identity of the inspector who owns a report.

    Passed explicitly into the report flow instead of being read from
    ambient session storage.
    """

    inspector_id: str
    name: str
    registration_id: str = ""
    role: str = ""

    def __post_init__(self) -> None:
        """Validate inspector context."""
        if not self.inspector_id or not self.inspector_id.strip():
            raise ValueError("Inspector ID cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Inspector name cannot be empty")


@dataclass(frozen=True)
class MachineInfo:
    """Machine under inspection."""

    name: str
    machine_id: Optional[str] = None
    serial_number: str = ""
    manufacturer: str = ""
    group: str = ""
    model: str = ""
    item: str = ""
    year: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate machine info."""
        if not self.name or not self.name.strip():
            raise ValueError("Machine name cannot be empty")
        if self.year is not None and self.year < 1900:
            raise ValueError("Machine year must be 1900 or later")


@dataclass(frozen=True)
class CustomerInfo:
    """Customer the inspection is performed for."""

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""

    def __post_init__(self) -> None:
        """Validate customer info."""
        if self.email and "@" not in self.email:
            raise ValueError("Invalid customer email format")
