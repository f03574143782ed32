"""In-memory org directory stub.

WARNING: This stub is for development/testing only.
"""

from __future__ import annotations

from src.application.ports.org_directory import OrgDirectoryProtocol
from src.domain.models.routing_policy import PersonIdentity


class OrgDirectoryStub(OrgDirectoryProtocol):
    """Manager lookups from a fixed mapping keyed by email.

    Attributes:
        fail_with: Exception raised by every lookup, if set.
    """

    def __init__(
        self,
        managers: dict[str, PersonIdentity] | None = None,
        fail_with: Exception | None = None,
    ) -> None:
        self._managers: dict[str, PersonIdentity] = {
            email.lower(): manager for email, manager in (managers or {}).items()
        }
        self.fail_with = fail_with
        self.lookups: list[PersonIdentity] = []

    def set_manager(self, employee_email: str, manager: PersonIdentity) -> None:
        """Register a manager for an employee."""
        self._managers[employee_email.lower()] = manager

    async def get_manager(self, person: PersonIdentity) -> PersonIdentity | None:
        """Look up a manager by the person's email."""
        self.lookups.append(person)
        if self.fail_with is not None:
            raise self.fail_with
        if not person.email:
            return None
        return self._managers.get(person.email.lower())

    def clear(self) -> None:
        """Clear registered managers and recorded lookups (for testing)."""
        self._managers.clear()
        self.lookups.clear()
        self.fail_with = None
