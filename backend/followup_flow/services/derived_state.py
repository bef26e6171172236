"""Derived prospect fields: next follow-up date and stage color code."""

from datetime import date
from typing import Iterable, Optional

import structlog

from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.suggestions import ColorCodeInput, ColorCodeResult

logger = structlog.get_logger()

FALLBACK_COLOR_CODE = "#CCCCCC"
FALLBACK_COLOR_REASONING = "Color code could not be generated; showing the neutral default."


def compute_next_follow_up_date(prospect_id: str, follow_ups: Iterable[FollowUp]) -> Optional[date]:
    """Earliest date among the prospect's Pending follow-ups, or None.

    Only calendar dates are compared; two follow-ups on the same day tie
    regardless of their time.
    """
    pending = [fu.date for fu in follow_ups if fu.prospect_id == prospect_id and fu.status == "Pending"]
    return min(pending) if pending else None


async def generate_color_code(generator, stage: int, prospect_name: str) -> Optional[ColorCodeResult]:
    """Ask the generator for a color code. Returns None on any failure."""
    try:
        return await generator.color_code(ColorCodeInput(stage=stage, prospect_name=prospect_name))
    except Exception as e:
        logger.warning("color_code_generation_failed", prospect_name=prospect_name, stage=stage, error=str(e))
        return None


async def regenerate_color_code(generator, stage: int, prospect_name: str) -> ColorCodeResult:
    """Color code for a stage, substituting the neutral fallback on failure."""
    result = await generate_color_code(generator, stage, prospect_name)
    if result is None:
        return ColorCodeResult(color_code=FALLBACK_COLOR_CODE, reasoning=FALLBACK_COLOR_REASONING)
    return result
