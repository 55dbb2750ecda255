from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Employee read model.

    ``id`` is the store key, ``employee_code`` the human facing number.
    """

    id: str
    employee_code: str
    name: str
    department_id: Optional[str]
    is_active: bool = True
