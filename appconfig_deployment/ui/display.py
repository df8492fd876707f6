"""
Console Display

Text rendering for deployment status and diff reports.
"""

from datetime import datetime, timezone
from typing import Optional

from ..api.models import Deployment, DeploymentState
from ..content.diff_engine import DiffResult

SEPARATOR = "─" * 40


def format_duration(seconds: float) -> str:
    """Render a duration as ``1h 2m 3s``, ``2m 3s`` or ``3s``."""
    total = int(round(max(seconds, 0)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_time(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")


def current_phase(deployment: Deployment) -> str:
    """Describe where an in-flight deployment is in its rollout."""
    if deployment.state == DeploymentState.BAKING:
        return "Baking (monitoring for issues)"

    percentage = deployment.percentage_complete
    if percentage >= 100:
        return "Completing deployment"
    if percentage >= 75:
        return "Final rollout phase"
    if percentage >= 50:
        return "Mid rollout phase"
    if percentage >= 25:
        return "Initial rollout phase"
    return "Starting deployment"


def format_deployment_status(
    deployment: Deployment,
    application: str,
    profile: str,
    environment: str,
    strategy_name: str = "",
    now: Optional[datetime] = None,
) -> str:
    """Render a deployment for the status command."""
    lines = ["", "Deployment Status", SEPARATOR]
    lines.append(f"  Application:   {application}")
    lines.append(f"  Profile:       {profile}")
    lines.append(f"  Environment:   {environment}")
    lines.append("")
    lines.append(f"  Deployment #:  {deployment.number}")
    lines.append(f"  Status:        {deployment.state}")
    lines.append(f"  Version:       {deployment.configuration_version}")

    if deployment.state != DeploymentState.ROLLED_BACK and deployment.description:
        lines.append(f"  Description:   {deployment.description}")
    if strategy_name:
        lines.append(f"  Strategy:      {strategy_name}")

    if deployment.started_at:
        lines.append(f"  Started:       {format_time(deployment.started_at)}")
    if deployment.completed_at:
        lines.append(f"  Completed:     {format_time(deployment.completed_at)}")
        if deployment.started_at:
            duration = deployment.completed_at - deployment.started_at
            lines.append(
                f"  Duration:      {format_duration(duration.total_seconds())}"
            )

    if deployment.is_ongoing:
        lines.append("")
        lines.append("  Progress")
        lines.append(f"  Percentage:    {deployment.percentage_complete:.1f}%")
        if deployment.started_at:
            now = now or datetime.now(timezone.utc)
            elapsed = (now - deployment.started_at).total_seconds()
            lines.append(f"  Elapsed:       {format_duration(elapsed)}")
            if deployment.percentage_complete > 0:
                remaining = elapsed / deployment.percentage_complete * 100 - elapsed
                if remaining > 0:
                    lines.append(
                        f"  Estimated:     {format_duration(remaining)} remaining"
                    )
        if deployment.growth_factor > 0:
            lines.append(f"  Growth Factor: {deployment.growth_factor:.1f}%")
        if deployment.final_bake_time_in_minutes > 0:
            lines.append(
                f"  Bake Time:     {deployment.final_bake_time_in_minutes} minutes"
            )
        lines.append("")
        lines.append(f"  Current Phase: {current_phase(deployment)}")

    if deployment.state == DeploymentState.ROLLED_BACK:
        lines.append("")
        lines.append("  ✗ Deployment was rolled back")
        reason = deployment.rollback_reason()
        if reason:
            lines.append(f"  Reason:        {reason}")

    lines.append("")
    return "\n".join(lines)


def format_diff_header(
    application: str,
    profile: str,
    environment: str,
    local_file: str,
    deployment: Optional[Deployment] = None,
) -> str:
    lines = ["Configuration Diff", "==================", ""]
    lines.append(f"Application:   {application}")
    lines.append(f"Profile:       {profile}")
    lines.append(f"Environment:   {environment}")
    lines.append("")
    if deployment is not None:
        lines.append(
            f"Remote Version: {deployment.configuration_version} "
            f"(Deployment #{deployment.number})"
        )
        if deployment.state:
            lines.append(f"Status:         {deployment.state}")
    else:
        lines.append("Remote Version: (none)")
    lines.append(f"Local File:     {local_file}")
    lines.append("")
    return "\n".join(lines)


def format_diff_summary(result: DiffResult) -> str:
    if not result.has_changes:
        return "✓ No changes detected"
    return f"Summary: {result.summary}"
