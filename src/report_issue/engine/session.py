"""
Session state for one run of the form.

`FormSession.values` maps field key -> collected string. A key is present only
when the user supplied it or the field is non-modifiable (seeded with its
placeholder by `seed_defaults()` at session start). It is cleared only by
`reset()`, which the router calls when the panel is opened fresh or the user
asks to change category.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from report_issue.schemas.form import FormSchema

logger = logging.getLogger(__name__)


class FormMode(str, Enum):
    START = "start"
    FORM = "form"


@dataclass
class IdentificationContext:
    """
    Device facts looked up once at startup.

    Slots are filled independently as lookups resolve; the submission reads
    whatever is filled at assembly time.
    """

    software: Optional[str] = None
    serial_number: Optional[str] = None
    product_id: Optional[str] = None
    device_id: Optional[str] = None
    contact_number: Optional[str] = None

    # Payload keys, as the receiving webhook expects them.
    WIRE_NAMES = {
        "software": "software",
        "serial_number": "SerialNumber",
        "product_id": "ProductId",
        "device_id": "deviceId",
        "contact_number": "contactNumber",
    }

    def to_payload(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for attr, wire in self.WIRE_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                out[wire] = value
        return out


@dataclass
class FormSession:
    schema: FormSchema
    values: Dict[str, str] = field(default_factory=dict)
    identification: IdentificationContext = field(default_factory=IdentificationContext)
    mode: FormMode = FormMode.FORM

    def __post_init__(self) -> None:
        self.seed_defaults()

    def reset(self) -> None:
        self.values.clear()
        self.seed_defaults()
        logger.info("Session reset (%d seeded values)", len(self.values))

    def seed_defaults(self) -> None:
        """Non-modifiable fields always carry their placeholder."""
        for spec in self.schema.form_fields:
            if not spec.modifiable:
                self.values[spec.key] = spec.placeholder

    def has(self, key: str) -> bool:
        return key in self.values

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> bool:
        """Store a value. Returns False (and stores nothing) for non-modifiable fields."""
        spec = self.schema.get(key)
        if spec is not None and not spec.modifiable:
            logger.info("Ignoring value for non-modifiable field [%s]", key)
            return False
        self.values[key] = value
        return True

    def snapshot(self) -> Dict[str, str]:
        return dict(self.values)
