"""Service wiring for request handlers."""

from fastapi import Depends

from followup_flow.config import settings
from followup_flow.middleware.auth import get_current_user
from followup_flow.repositories.base import FollowUpRepository, ProspectRepository
from followup_flow.services.gamification import (
    GamificationStore, GamificationTracker, InMemoryGamificationStore, RedisGamificationStore,
)
from followup_flow.services.generation import TextGenerator
from followup_flow.services.prospects import ProspectLocks, ProspectService
from followup_flow.services.suggestions import SuggestionService

_prospect_repo: ProspectRepository | None = None
_follow_up_repo: FollowUpRepository | None = None
_gamification_store: GamificationStore | None = None
_generator: TextGenerator | None = None
_locks = ProspectLocks()


def get_repositories() -> tuple[ProspectRepository, FollowUpRepository]:
    global _prospect_repo, _follow_up_repo
    if _prospect_repo is None or _follow_up_repo is None:
        if settings.storage_backend == "sql":
            from followup_flow.repositories.sql import SqlFollowUpRepository, SqlProspectRepository
            _prospect_repo, _follow_up_repo = SqlProspectRepository(), SqlFollowUpRepository()
        else:
            from followup_flow.repositories.memory import InMemoryFollowUpRepository, InMemoryProspectRepository
            _prospect_repo, _follow_up_repo = InMemoryProspectRepository(), InMemoryFollowUpRepository()
    return _prospect_repo, _follow_up_repo


def get_gamification_store() -> GamificationStore:
    global _gamification_store
    if _gamification_store is None:
        if settings.gamification_backend == "redis":
            _gamification_store = RedisGamificationStore()
        else:
            _gamification_store = InMemoryGamificationStore()
    return _gamification_store


def get_text_generator() -> TextGenerator:
    global _generator
    if _generator is None:
        _generator = TextGenerator()
    return _generator


def get_locks() -> ProspectLocks:
    return _locks


def build_prospect_service(user_id: str, generator) -> ProspectService:
    prospects, follow_ups = get_repositories()
    tracker = GamificationTracker(get_gamification_store(), user_id)
    return ProspectService(prospects, follow_ups, generator, tracker, locks=_locks)


def get_prospect_service(
    user_id: str = Depends(get_current_user),
    generator=Depends(get_text_generator),
) -> ProspectService:
    return build_prospect_service(user_id, generator)


def get_suggestion_service(
    service: ProspectService = Depends(get_prospect_service),
    generator=Depends(get_text_generator),
) -> SuggestionService:
    return SuggestionService(service, generator)
