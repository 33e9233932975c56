"""Typed caller identity for moderation, broadcast and owner operations.

The identity is built once at the transport boundary (see ``core.auth``)
and passed explicitly into services; it only carries what the core needs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CallerRole(str, enum.Enum):
    """Roles understood by the feedback and notification services."""

    OWNER = "owner"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


@dataclass(frozen=True)
class CallerIdentity:
    """Represents the authenticated caller of a request."""

    id: int
    role: CallerRole

    @property
    def is_admin(self) -> bool:
        """Return ``True`` for admin and super admin callers."""
        return self.role in (CallerRole.ADMIN, CallerRole.SUPER_ADMIN)

    @property
    def is_owner(self) -> bool:
        return self.role == CallerRole.OWNER
