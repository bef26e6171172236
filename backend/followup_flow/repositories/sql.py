"""SQLAlchemy-backed repositories."""

from typing import Callable, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from followup_flow import models
from followup_flow.database import async_session
from followup_flow.repositories.base import FollowUpRepository, ProspectRepository
from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.prospect import Prospect

_PROSPECT_COLUMNS = (
    "owner_id", "name", "email", "phone", "initial_data", "avatar_url",
    "current_funnel_stage", "follow_up_stage_number",
    "color_code", "color_code_reasoning", "next_follow_up_date",
    "last_contacted_date", "created_at", "updated_at",
)

_FOLLOW_UP_COLUMNS = (
    "owner_id", "prospect_id", "date", "time", "method", "notes", "status",
    "ai_suggested_tone", "ai_suggested_content", "ai_suggested_tool",
    "created_at", "updated_at",
)


def _sync_interactions(row: models.Prospect, prospect: Prospect) -> None:
    """Append interactions not yet persisted; existing ones are immutable."""
    known = {i.id for i in row.interaction_history}
    for position, interaction in enumerate(prospect.interaction_history):
        if interaction.id in known:
            continue
        row.interaction_history.append(models.Interaction(
            id=interaction.id,
            position=position,
            date=interaction.date,
            type=interaction.type,
            summary=interaction.summary,
            outcome=interaction.outcome,
        ))


class SqlProspectRepository(ProspectRepository):
    def __init__(self, session_factory: Callable[[], AsyncSession] = async_session):
        self._session_factory = session_factory

    async def _owned_row(self, session: AsyncSession, owner_id: str, prospect_id: str) -> Optional[models.Prospect]:
        row = await session.get(models.Prospect, prospect_id)
        return row if row is not None and row.owner_id == owner_id else None

    async def get(self, owner_id: str, prospect_id: str) -> Optional[Prospect]:
        async with self._session_factory() as session:
            row = await self._owned_row(session, owner_id, prospect_id)
            return Prospect.model_validate(row) if row else None

    async def owners(self) -> list[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(models.Prospect.owner_id).distinct())
            return sorted(result.scalars().all())

    async def list(self, owner_id: str) -> list[Prospect]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(models.Prospect)
                .where(models.Prospect.owner_id == owner_id)
                .order_by(models.Prospect.created_at)
            )
            return [Prospect.model_validate(row) for row in result.scalars().all()]

    async def add(self, prospect: Prospect) -> None:
        async with self._session_factory() as session:
            row = models.Prospect(id=prospect.id, interaction_history=[])
            for column in _PROSPECT_COLUMNS:
                setattr(row, column, getattr(prospect, column))
            _sync_interactions(row, prospect)
            session.add(row)
            await session.commit()

    async def save(self, prospect: Prospect) -> None:
        async with self._session_factory() as session:
            row = await self._owned_row(session, prospect.owner_id, prospect.id)
            if row is None:
                raise KeyError(prospect.id)
            for column in _PROSPECT_COLUMNS:
                setattr(row, column, getattr(prospect, column))
            _sync_interactions(row, prospect)
            await session.commit()

    async def delete(self, owner_id: str, prospect_id: str) -> None:
        async with self._session_factory() as session:
            row = await self._owned_row(session, owner_id, prospect_id)
            if row is not None:
                await session.delete(row)
                await session.commit()


class SqlFollowUpRepository(FollowUpRepository):
    def __init__(self, session_factory: Callable[[], AsyncSession] = async_session):
        self._session_factory = session_factory

    async def get(self, owner_id: str, follow_up_id: str) -> Optional[FollowUp]:
        async with self._session_factory() as session:
            row = await session.get(models.FollowUp, follow_up_id)
            if row is None or row.owner_id != owner_id:
                return None
            return FollowUp.model_validate(row)

    async def list_all(self, owner_id: str) -> list[FollowUp]:
        async with self._session_factory() as session:
            result = await session.execute(select(models.FollowUp).where(models.FollowUp.owner_id == owner_id))
            return [FollowUp.model_validate(row) for row in result.scalars().all()]

    async def list_for_prospect(self, owner_id: str, prospect_id: str) -> list[FollowUp]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(models.FollowUp).where(
                    models.FollowUp.owner_id == owner_id,
                    models.FollowUp.prospect_id == prospect_id,
                )
            )
            return [FollowUp.model_validate(row) for row in result.scalars().all()]

    async def add(self, follow_up: FollowUp) -> None:
        async with self._session_factory() as session:
            row = models.FollowUp(id=follow_up.id)
            for column in _FOLLOW_UP_COLUMNS:
                setattr(row, column, getattr(follow_up, column))
            session.add(row)
            await session.commit()

    async def save(self, follow_up: FollowUp) -> None:
        async with self._session_factory() as session:
            row = await session.get(models.FollowUp, follow_up.id)
            if row is None or row.owner_id != follow_up.owner_id:
                raise KeyError(follow_up.id)
            for column in _FOLLOW_UP_COLUMNS:
                setattr(row, column, getattr(follow_up, column))
            await session.commit()

    async def delete(self, owner_id: str, follow_up_id: str) -> None:
        async with self._session_factory() as session:
            await session.execute(
                delete(models.FollowUp).where(
                    models.FollowUp.id == follow_up_id,
                    models.FollowUp.owner_id == owner_id,
                )
            )
            await session.commit()

    async def delete_for_prospect(self, owner_id: str, prospect_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(models.FollowUp).where(
                    models.FollowUp.owner_id == owner_id,
                    models.FollowUp.prospect_id == prospect_id,
                )
            )
            await session.commit()
            return result.rowcount
