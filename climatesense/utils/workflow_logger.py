"""Workflow Logger for ClimateSense.

Provides highly visible, formatted logging for design workflows
with distinctive visual markers that stand out in log streams.
"""

import json
import logging
import structlog
from typing import Dict, Any, List, Optional
from datetime import datetime, timezone

logger = structlog.get_logger()

# Visual markers for different log types
BANNER_WIDTH = 80
WORKFLOW_BANNER_CHAR = "═"
FAILURE_BANNER_CHAR = "!"


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog for console output."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def _create_banner(char: str, text: str, width: int = BANNER_WIDTH) -> str:
    """Create a centered banner with given character."""
    text_with_spaces = f" {text} "
    padding = (width - len(text_with_spaces)) // 2
    return char * padding + text_with_spaces + char * (width - padding - len(text_with_spaces))


def _format_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format dictionary as pretty JSON string."""
    try:
        return json.dumps(data, indent=indent, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(data)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_workflow_start(workflow: str, session_id: str, context: Optional[Dict[str, Any]] = None) -> None:
    """Log workflow start with prominent banner."""
    print("\n")
    print(WORKFLOW_BANNER_CHAR * BANNER_WIDTH)
    print(_create_banner(WORKFLOW_BANNER_CHAR, f"▶ WORKFLOW: {workflow.upper()}"))
    print(WORKFLOW_BANNER_CHAR * BANNER_WIDTH)
    print(f"║ Session ID : {session_id}")
    print(f"║ Timestamp  : {_timestamp()}")
    if context:
        print("║ Context    :")
        for line in _format_json(context).split('\n'):
            print(f"  {line}")
    print(WORKFLOW_BANNER_CHAR * BANNER_WIDTH)

    logger.info(
        "workflow_start_logged",
        workflow=workflow,
        session_id=session_id
    )


def log_workflow_complete(
    workflow: str,
    session_id: str,
    duration_ms: int,
    steps: List[str],
    tokens_used: int = 0
) -> None:
    """Log workflow completion with summary."""
    print("\n")
    print(WORKFLOW_BANNER_CHAR * BANNER_WIDTH)
    print(_create_banner(WORKFLOW_BANNER_CHAR, f"✓ {workflow.upper()} COMPLETED"))
    print(WORKFLOW_BANNER_CHAR * BANNER_WIDTH)
    print(f"║ Session ID : {session_id}")
    print(f"║ Timestamp  : {_timestamp()}")
    print(f"║ Duration   : {duration_ms:,} ms ({duration_ms / 1000:.2f}s)")
    print(f"║ Steps      : {' → '.join(steps)}")
    print(f"║ Tokens     : {tokens_used:,}")
    print(WORKFLOW_BANNER_CHAR * BANNER_WIDTH)
    print("\n")

    logger.info(
        "workflow_complete_logged",
        workflow=workflow,
        session_id=session_id,
        duration_ms=duration_ms,
        tokens_used=tokens_used
    )


def log_workflow_failed(
    workflow: str,
    session_id: str,
    failed_step: str,
    error: str
) -> None:
    """Log workflow failure with details."""
    print("\n")
    print(FAILURE_BANNER_CHAR * BANNER_WIDTH)
    print(_create_banner(FAILURE_BANNER_CHAR, f"✗ {workflow.upper()} FAILED"))
    print(FAILURE_BANNER_CHAR * BANNER_WIDTH)
    print(f"║ Session ID  : {session_id}")
    print(f"║ Timestamp   : {_timestamp()}")
    print(f"║ Failed Step : {failed_step}")
    print(f"║ Error       : {error}")
    print(FAILURE_BANNER_CHAR * BANNER_WIDTH)
    print("\n")

    logger.error(
        "workflow_failed_logged",
        workflow=workflow,
        session_id=session_id,
        failed_step=failed_step,
        error=error
    )


def log_workflow_skipped(workflow: str, session_id: str, reason: str) -> None:
    """Log a workflow that was not started because a precondition failed."""
    logger.info(
        "workflow_skipped",
        workflow=workflow,
        session_id=session_id,
        reason=reason
    )


def log_state_summary(session_id: str, state: Any) -> None:
    """Log a compact summary of a design state."""
    plan = getattr(state, "floor_plan", None)
    logger.info(
        "design_state",
        session_id=session_id,
        has_climate=getattr(state, "climate", None) is not None,
        plan_title=plan.design_title if plan else None,
        room_count=len(plan.rooms) if plan else 0,
        plan_revision=getattr(state, "plan_revision", 0),
        error=getattr(state, "error", None),
        history_length=len(getattr(state, "history", ()))
    )
