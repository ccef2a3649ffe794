"""Turn discovery findings into wiring goals for a work queue."""

from __future__ import annotations

import secrets
import time
from typing import List

from .discovery import PURPOSE_UNKNOWN, file_name
from .models import DiscoveryReport, FeatureStatus, WiringGoal


def _goal_id(now: float) -> str:
    return f"discovery_{int(now * 1000)}_{secrets.token_hex(3)}"


def generate_wiring_goals(report: DiscoveryReport) -> List[WiringGoal]:
    """One PENDING goal per non-active discovery, in report order."""
    goals: List[WiringGoal] = []

    for discovery in report.discoveries:
        if discovery.status == FeatureStatus.ACTIVE:
            continue

        name = file_name(discovery.file)
        purpose = discovery.inferred_purpose or PURPOSE_UNKNOWN
        if discovery.status == FeatureStatus.DISCONNECTED:
            prompt = (
                f'Wire the disconnected feature "{name}" into the application. '
                f"Purpose: {purpose}. "
                "This file is never imported by any other file in the project. "
                "Find the appropriate integration point and connect it."
            )
        else:
            prompt = (
                f'Complete the integration of "{name}". '
                f"Purpose: {purpose}. "
                f"Currently imported by: {', '.join(discovery.consumers)} "
                "but not reachable from any application entry point. "
                "Trace the import chain and connect the missing link."
            )

        now = time.time()
        goals.append(WiringGoal(id=_goal_id(now), prompt=prompt, created_at=now))

    return goals
