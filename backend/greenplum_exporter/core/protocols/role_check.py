"""RoleChecker protocol backing the /ismaster probe."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RoleChecker(Protocol):
    """Answers whether this host is the acting primary."""

    async def is_primary(self) -> bool:
        """Query the current role; any failure counts as not primary."""
        ...
