from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Student:
    """Domain entity: a lab member who clocks in and out."""

    student_id: str
    name: str
    password_hash: str
    role: Role
    team_id: Optional[str] = None
