"""
Audit & logging utilities

Purpose: configure logging once per process and persist a trace of every safety assessment
for later review.

Input: the artifacts of one assessment (medication id, profile id, prompt, outcome, statuses).

Output: log records on the "audit" logger.

Example: log_assessment("med-1", "user-9", "parsed", "caution", "danger", prompt_chars=1830)
"""
import logging
from typing import Optional

import config

audit_logger = logging.getLogger("audit")


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def log_assessment(
    medication_id: str,
    profile_id: str,
    outcome: str,
    allergy_status: Optional[str] = None,
    ai_status: Optional[str] = None,
    prompt_chars: Optional[int] = None,
    conflicts: Optional[list] = None,
) -> None:
    """Write one audit line for an assessment. Profile contents are not logged, only the id."""
    audit_logger.info(
        "[ASSESS] medication=%s profile=%s outcome=%s allergy=%s ai=%s",
        medication_id, profile_id, outcome, allergy_status, ai_status,
    )
    if prompt_chars is not None:
        audit_logger.debug("[ASSESS] prompt length: %d chars", prompt_chars)
    if conflicts:
        audit_logger.debug("[ASSESS] conflicting ingredients: %s", ", ".join(conflicts))
