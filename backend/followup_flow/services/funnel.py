"""Funnel stage progress."""

from followup_flow.schemas.prospect import FUNNEL_STAGES, FunnelProgress


def funnel_progress(stage: str) -> FunnelProgress:
    index = FUNNEL_STAGES.index(stage)
    return FunnelProgress(
        current_stage=stage,
        stage_index=index,
        completed_stages=FUNNEL_STAGES[:index],
        remaining_stages=FUNNEL_STAGES[index + 1:],
        percent_complete=round(index / (len(FUNNEL_STAGES) - 1) * 100, 1),
    )
