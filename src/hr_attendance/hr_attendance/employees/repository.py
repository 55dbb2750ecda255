from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Read access to employees.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, *, department_id: Optional[str] = None) -> Sequence[Employee]:
        raise NotImplementedError
