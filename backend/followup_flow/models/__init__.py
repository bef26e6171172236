from followup_flow.models.prospect import Prospect, Interaction
from followup_flow.models.follow_up import FollowUp

__all__ = ["Prospect", "Interaction", "FollowUp"]
