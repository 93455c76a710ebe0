"""Category aggregate.

Categories group a school's supplies (paper, art, science kits, ...).
They are reference data for the ledger: items point at them and the
category rollup report groups by them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from supply_ledger.domain.exceptions import ValidationError

DEFAULT_COLOR = "#2196F3"
EDITABLE_FIELDS = frozenset({"name", "description", "color"})
_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass
class Category:

    id: str
    tenant_id: str
    name: str
    description: str | None = None
    color: str = DEFAULT_COLOR
    is_active: bool = True

    @staticmethod
    def create(
        id: str,
        tenant_id: str,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Category:
        return Category(
            id=id,
            tenant_id=tenant_id,
            name=_check_name(name),
            description=(description or "").strip() or None,
            color=_check_color(color or DEFAULT_COLOR),
        )

    def update_details(self, changes: dict) -> None:
        """Rename, recolor, or re-describe. Nothing changes if any value is invalid."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown category field(s): {', '.join(sorted(unknown))}"
            )
        name = _check_name(changes["name"]) if "name" in changes else self.name
        color = _check_color(changes["color"]) if "color" in changes else self.color
        if "description" in changes:
            self.description = (changes["description"] or "").strip() or None
        self.name = name
        self.color = color

    def deactivate(self) -> None:
        if not self.is_active:
            raise ValidationError(f"Category '{self.name}' is already inactive")
        self.is_active = False


def _check_name(name: str | None) -> str:
    if not name or not name.strip():
        raise ValidationError("Category name is required")
    return name.strip()


def _check_color(color: str | None) -> str:
    if not color or not _HEX_COLOR.match(color):
        raise ValidationError(f"Color must be a valid hex color, got {color!r}")
    return color
