"""Render a route plan as the commands that would install it."""

from __future__ import annotations

import shlex
import sys
from typing import List, Optional

from cloudroute_table.command import build_command

from .config import RoutePlan

EMPTY_PLAN = "# no routes planned"


def render_plan(plan: RoutePlan, platform: Optional[str] = None) -> str:
    """Return one shell line per route in ``plan`` for ``platform``."""

    platform = platform or sys.platform
    if plan.is_empty:
        return EMPTY_PLAN

    lines: List[str] = []
    for spec in plan.routes:
        lines.append(shlex.join(build_command(spec, platform)))
    return "\n".join(lines)
