"""Tests for wiring goal generation."""

import re

from depgraph_cli.discovery import PURPOSE_UNKNOWN, DiscoveryScanner
from depgraph_cli.goals import generate_wiring_goals
from depgraph_cli.loader import load_source_files
from depgraph_cli.models import DiscoveredFeature, DiscoveryReport, FeatureStatus


def _report(*discoveries):
    return DiscoveryReport(
        scanned_files=len(discoveries),
        discoveries=tuple(discoveries),
        entry_points=(),
        timestamp=0.0,
        duration=0.0,
    )


def test_active_features_get_no_goal():
    report = _report(DiscoveredFeature("/src/UserService.ts", FeatureStatus.ACTIVE))
    assert generate_wiring_goals(report) == []


def test_disconnected_prompt():
    report = _report(
        DiscoveredFeature("/src/BillingService.ts", FeatureStatus.DISCONNECTED, inferred_purpose="Bills users")
    )
    [goal] = generate_wiring_goals(report)

    assert goal.prompt.startswith('Wire the disconnected feature "BillingService.ts" into the application.')
    assert "Purpose: Bills users." in goal.prompt
    assert goal.status == "PENDING"
    assert goal.source == "discovery"
    assert re.fullmatch(r"discovery_\d+_[0-9a-f]{6}", goal.id)


def test_partial_prompt_lists_consumers():
    report = _report(
        DiscoveredFeature(
            "/src/ReportAgent.ts",
            FeatureStatus.PARTIALLY_CONNECTED,
            consumers=["/src/workers/cron.ts", "/src/jobs/daily.ts"],
        )
    )
    [goal] = generate_wiring_goals(report)

    assert goal.prompt.startswith('Complete the integration of "ReportAgent.ts".')
    assert "Currently imported by: /src/workers/cron.ts, /src/jobs/daily.ts" in goal.prompt


def test_goals_follow_report_order_with_unique_ids(sample_project_path):
    report = DiscoveryScanner().scan(load_source_files(sample_project_path))
    goals = generate_wiring_goals(report)

    assert [g.prompt.split('"')[1] for g in goals] == ["ReportAgent.ts", "BillingService.ts"]
    assert len({g.id for g in goals}) == len(goals)


def test_missing_purpose_uses_fallback_text():
    report = _report(
        DiscoveredFeature("/src/BillingService.ts", FeatureStatus.DISCONNECTED),
        DiscoveredFeature("/src/ReportAgent.ts", FeatureStatus.PARTIALLY_CONNECTED, consumers=["/src/cron.ts"]),
    )
    goals = generate_wiring_goals(report)

    assert len(goals) == 2
    for goal in goals:
        assert "Purpose: ." not in goal.prompt
        assert f"Purpose: {PURPOSE_UNKNOWN}." in goal.prompt
