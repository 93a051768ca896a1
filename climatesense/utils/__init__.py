"""Utility modules for ClimateSense."""

from utils.workflow_logger import (
    configure_logging,
    log_workflow_start,
    log_workflow_complete,
    log_workflow_failed,
    log_workflow_skipped,
    log_state_summary,
)

__all__ = [
    "configure_logging",
    "log_workflow_start",
    "log_workflow_complete",
    "log_workflow_failed",
    "log_workflow_skipped",
    "log_state_summary",
]
