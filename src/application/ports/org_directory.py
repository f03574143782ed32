"""Identity/org directory port.

Supplies the manager identity used for Manager assignees and approvers.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.models.routing_policy import PersonIdentity


class OrgDirectoryProtocol(Protocol):
    """Protocol for manager lookups."""

    async def get_manager(self, person: PersonIdentity) -> PersonIdentity | None:
        """Look up a person's manager.

        Args:
            person: The person whose manager is requested.

        Returns:
            The manager identity, or None if the person has no known manager.
        """
        ...


__all__ = ["OrgDirectoryProtocol"]
