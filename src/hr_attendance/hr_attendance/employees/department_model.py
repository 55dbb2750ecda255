from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Department:
    id: str
    name: str
    is_active: bool = True
