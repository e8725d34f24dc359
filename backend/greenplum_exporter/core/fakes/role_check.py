"""Fake RoleChecker for testing."""

from typing import Optional


class FakeRoleChecker:
    """In-memory RoleChecker stand-in.

    Returns ``primary`` from ``is_primary()`` unless ``error`` is set, in which
    case it raises that exception.
    """

    def __init__(self, primary: bool = True, error: Optional[Exception] = None) -> None:
        self.primary = primary
        self.error = error
        self.calls: int = 0

    async def is_primary(self) -> bool:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.primary
