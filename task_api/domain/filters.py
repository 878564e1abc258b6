from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import TaskStatus


@dataclass(frozen=True)
class TaskFilters:
    status: Optional[TaskStatus] = None
