"""Prospect service - entity store operations and the derived state they maintain.

Every mutation of a prospect or its follow-ups runs under that prospect's
lock, writes the primary record first, then brings derived state up to date:

1. nextFollowUpDate, recomputed after any follow-up create/update/delete
2. colorCode, regenerated when followUpStageNumber actually changes
3. gamification stats, on prospect add and on follow-ups leaving Pending
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from followup_flow.errors import NotFoundError, StatusTransitionError
from followup_flow.repositories.base import FollowUpRepository, ProspectRepository
from followup_flow.schemas.common import utcnow
from followup_flow.schemas.follow_up import FollowUp, FollowUpCreate, FollowUpUpdate
from followup_flow.schemas.gamification import AccountabilitySummary, GamificationStats
from followup_flow.schemas.prospect import Interaction, InteractionCreate, Prospect, ProspectCreate, ProspectUpdate
from followup_flow.services.accountability import summarize_activity
from followup_flow.services.derived_state import (
    FALLBACK_COLOR_CODE,
    compute_next_follow_up_date,
    generate_color_code,
    regenerate_color_code,
)
from followup_flow.services.gamification import GamificationTracker

logger = structlog.get_logger()


def _new_id() -> str:
    return uuid.uuid4().hex


def default_avatar_url(name: str) -> str:
    return f"https://placehold.co/100x100.png?text={name[:1].upper()}"


class ProspectLocks:
    """One asyncio.Lock per prospect id, shared by every service instance.

    An entry lives only while some caller holds or waits on it.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, prospect_id: str):
        lock = self._locks.setdefault(prospect_id, asyncio.Lock())
        self._waiters[prospect_id] = self._waiters.get(prospect_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[prospect_id] -= 1
            if not self._waiters[prospect_id]:
                del self._waiters[prospect_id]
                del self._locks[prospect_id]


class ProspectService:
    """Entity operations for one user; every read and write is scoped to that user's records."""

    def __init__(
        self,
        prospects: ProspectRepository,
        follow_ups: FollowUpRepository,
        generator,
        tracker: GamificationTracker,
        locks: Optional[ProspectLocks] = None,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.prospects = prospects
        self.follow_ups = follow_ups
        self.generator = generator
        self.tracker = tracker
        self.locks = locks if locks is not None else ProspectLocks()
        self.clock = clock
        self.id_factory = id_factory

    @property
    def owner_id(self) -> str:
        return self.tracker.user_id

    # --- Prospects ---

    async def create_prospect(self, data: ProspectCreate) -> Prospect:
        now = self.clock()
        prospect = Prospect(
            id=self.id_factory(),
            owner_id=self.owner_id,
            **data.model_dump(exclude={"avatar_url"}),
            avatar_url=data.avatar_url or default_avatar_url(data.name),
            interaction_history=[],
            created_at=now,
            updated_at=now,
        )

        async with self.locks.hold(prospect.id):
            await self.prospects.add(prospect)

            color = await regenerate_color_code(self.generator, prospect.follow_up_stage_number, prospect.name)
            prospect.color_code = color.color_code
            prospect.color_code_reasoning = color.reasoning
            await self.prospects.save(prospect)

        self.tracker.on_prospect_added()
        logger.info("prospect_created", prospect_id=prospect.id, owner_id=self.owner_id,
                    stage=prospect.follow_up_stage_number, color_code=prospect.color_code)
        return prospect

    async def get_prospect(self, prospect_id: str) -> Prospect:
        prospect = await self.prospects.get(self.owner_id, prospect_id)
        if prospect is None:
            raise NotFoundError("Prospect", prospect_id)
        return prospect

    async def list_prospects(self) -> list[Prospect]:
        return await self.prospects.list(self.owner_id)

    async def update_prospect(self, prospect_id: str, updates: ProspectUpdate) -> Prospect:
        changes = updates.model_dump(exclude_unset=True)

        async with self.locks.hold(prospect_id):
            current = await self.get_prospect(prospect_id)
            # Re-validate the merged record so bad input fails before any write
            updated = Prospect.model_validate({**current.model_dump(), **changes, "updated_at": self.clock()})
            await self.prospects.save(updated)

            new_stage = changes.get("follow_up_stage_number")
            if new_stage is not None and new_stage != current.follow_up_stage_number:
                color = await generate_color_code(self.generator, new_stage, updated.name)
                if color is not None:
                    updated.color_code = color.color_code
                    updated.color_code_reasoning = color.reasoning
                    await self.prospects.save(updated)
                else:
                    logger.warning("color_code_kept", prospect_id=prospect_id, color_code=updated.color_code)

        logger.info("prospect_updated", prospect_id=prospect_id, fields=sorted(changes))
        return updated

    async def delete_prospect(self, prospect_id: str) -> None:
        """Delete a prospect, its interactions and all of its follow-ups."""
        async with self.locks.hold(prospect_id):
            await self.get_prospect(prospect_id)
            removed = await self.follow_ups.delete_for_prospect(self.owner_id, prospect_id)
            await self.prospects.delete(self.owner_id, prospect_id)
        logger.info("prospect_deleted", prospect_id=prospect_id, follow_ups_removed=removed)

    async def add_interaction(self, prospect_id: str, data: InteractionCreate) -> Interaction:
        async with self.locks.hold(prospect_id):
            prospect = await self.get_prospect(prospect_id)
            interaction = Interaction(id=self.id_factory(), **data.model_dump())
            prospect.interaction_history.append(interaction)
            prospect.last_contacted_date = interaction.date
            prospect.updated_at = self.clock()
            await self.prospects.save(prospect)

        logger.info("interaction_logged", prospect_id=prospect_id, type=interaction.type)
        return interaction

    # --- Follow-ups ---

    async def add_follow_up(self, data: FollowUpCreate) -> FollowUp:
        async with self.locks.hold(data.prospect_id):
            await self.get_prospect(data.prospect_id)
            now = self.clock()
            follow_up = FollowUp(id=self.id_factory(), owner_id=self.owner_id, **data.model_dump(),
                                 status="Pending", created_at=now, updated_at=now)
            await self.follow_ups.add(follow_up)
            await self._on_follow_up_changed(data.prospect_id)

        logger.info("follow_up_scheduled", prospect_id=data.prospect_id, follow_up_id=follow_up.id,
                    date=follow_up.date.isoformat())
        return follow_up

    async def update_follow_up(self, follow_up_id: str, updates: FollowUpUpdate) -> FollowUp:
        changes = updates.model_dump(exclude_unset=True)
        located = await self._require_follow_up(follow_up_id)

        async with self.locks.hold(located.prospect_id):
            before = await self._require_follow_up(follow_up_id)
            requested = changes.get("status")
            if requested is not None and before.status != "Pending" and requested != before.status:
                raise StatusTransitionError(follow_up_id, before.status, requested)

            after = FollowUp.model_validate({**before.model_dump(), **changes, "updated_at": self.clock()})
            await self.follow_ups.save(after)

            if before.status == "Pending" and after.status != "Pending":
                self.tracker.on_follow_up_status_changed(before, after)
            if after.status != before.status or after.date != before.date:
                await self._on_follow_up_changed(after.prospect_id)

        logger.info("follow_up_updated", follow_up_id=follow_up_id, status=after.status, fields=sorted(changes))
        return after

    async def delete_follow_up(self, follow_up_id: str) -> None:
        located = await self._require_follow_up(follow_up_id)

        async with self.locks.hold(located.prospect_id):
            await self._require_follow_up(follow_up_id)
            await self.follow_ups.delete(self.owner_id, follow_up_id)
            await self._on_follow_up_changed(located.prospect_id)

        logger.info("follow_up_deleted", follow_up_id=follow_up_id, prospect_id=located.prospect_id)

    async def list_follow_ups_for_prospect(self, prospect_id: str) -> list[FollowUp]:
        follow_ups = await self.follow_ups.list_for_prospect(self.owner_id, prospect_id)
        return sorted(follow_ups, key=lambda fu: (fu.date, fu.time))

    async def list_upcoming_follow_ups(self, window_days: int = 7) -> list[FollowUp]:
        """Pending follow-ups dated within [today, today + window_days], soonest first."""
        today = self.clock().date()
        end = today + timedelta(days=window_days)
        upcoming = [
            fu for fu in await self.follow_ups.list_all(self.owner_id)
            if fu.status == "Pending" and today <= fu.date <= end
        ]
        return sorted(upcoming, key=lambda fu: (fu.date, fu.time))

    async def _require_follow_up(self, follow_up_id: str) -> FollowUp:
        follow_up = await self.follow_ups.get(self.owner_id, follow_up_id)
        if follow_up is None:
            raise NotFoundError("FollowUp", follow_up_id)
        return follow_up

    async def _on_follow_up_changed(self, prospect_id: str) -> None:
        """Keep nextFollowUpDate equal to the earliest Pending follow-up date.

        Caller must hold the prospect's lock.
        """
        await _sync_next_follow_up_date(self.prospects, self.follow_ups, self.owner_id, prospect_id)

    # --- Stats ---

    def get_gamification_stats(self) -> GamificationStats:
        return self.tracker.get_stats()

    async def get_accountability_summary(self, window_days: int = 14) -> AccountabilitySummary:
        return summarize_activity(
            await self.prospects.list(self.owner_id),
            await self.follow_ups.list_all(self.owner_id),
            current_streak=self.tracker.get_stats().follow_up_streak,
            window_days=window_days,
            now=self.clock(),
        )


async def _sync_next_follow_up_date(prospects: ProspectRepository, follow_ups: FollowUpRepository,
                                    owner_id: str, prospect_id: str) -> bool:
    prospect = await prospects.get(owner_id, prospect_id)
    if prospect is None:
        return False
    next_date = compute_next_follow_up_date(prospect_id, await follow_ups.list_for_prospect(owner_id, prospect_id))
    if prospect.next_follow_up_date == next_date:
        return False
    prospect.next_follow_up_date = next_date
    await prospects.save(prospect)
    return True


async def backfill_derived_state(
    prospects: ProspectRepository,
    follow_ups: FollowUpRepository,
    generator,
    locks: ProspectLocks,
) -> int:
    """Fill missing color codes and resync next follow-up dates for every owner.

    Prospects without a color code, or still on the neutral fallback, get
    one more generation attempt. Returns the number of prospects changed.
    """
    changed = 0
    for owner_id in await prospects.owners():
        for prospect in await prospects.list(owner_id):
            async with locks.hold(prospect.id):
                current = await prospects.get(owner_id, prospect.id)
                if current is None:
                    continue
                dirty = False
                if not current.color_code or current.color_code == FALLBACK_COLOR_CODE:
                    color = await regenerate_color_code(generator, current.follow_up_stage_number, current.name)
                    current.color_code = color.color_code
                    current.color_code_reasoning = color.reasoning
                    await prospects.save(current)
                    dirty = True
                if await _sync_next_follow_up_date(prospects, follow_ups, owner_id, current.id):
                    dirty = True
                if dirty:
                    changed += 1

    logger.info("derived_state_backfilled", prospects_changed=changed)
    return changed
