"""In-process repositories, used for local runs and tests."""

from typing import Optional

from followup_flow.repositories.base import FollowUpRepository, ProspectRepository
from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.prospect import Prospect


class InMemoryProspectRepository(ProspectRepository):
    def __init__(self):
        self._items: dict[str, Prospect] = {}

    def _owned(self, owner_id: str, prospect_id: str) -> Optional[Prospect]:
        prospect = self._items.get(prospect_id)
        return prospect if prospect and prospect.owner_id == owner_id else None

    async def get(self, owner_id: str, prospect_id: str) -> Optional[Prospect]:
        prospect = self._owned(owner_id, prospect_id)
        return prospect.model_copy(deep=True) if prospect else None

    async def owners(self) -> list[str]:
        return sorted({p.owner_id for p in self._items.values()})

    async def list(self, owner_id: str) -> list[Prospect]:
        return [p.model_copy(deep=True) for p in self._items.values() if p.owner_id == owner_id]

    async def add(self, prospect: Prospect) -> None:
        if prospect.id in self._items:
            raise ValueError(f"Prospect {prospect.id} already exists")
        self._items[prospect.id] = prospect.model_copy(deep=True)

    async def save(self, prospect: Prospect) -> None:
        if self._owned(prospect.owner_id, prospect.id) is None:
            raise KeyError(prospect.id)
        self._items[prospect.id] = prospect.model_copy(deep=True)

    async def delete(self, owner_id: str, prospect_id: str) -> None:
        if self._owned(owner_id, prospect_id) is not None:
            del self._items[prospect_id]


class InMemoryFollowUpRepository(FollowUpRepository):
    def __init__(self):
        self._items: dict[str, FollowUp] = {}

    def _owned(self, owner_id: str, follow_up_id: str) -> Optional[FollowUp]:
        follow_up = self._items.get(follow_up_id)
        return follow_up if follow_up and follow_up.owner_id == owner_id else None

    async def get(self, owner_id: str, follow_up_id: str) -> Optional[FollowUp]:
        follow_up = self._owned(owner_id, follow_up_id)
        return follow_up.model_copy(deep=True) if follow_up else None

    async def list_all(self, owner_id: str) -> list[FollowUp]:
        return [fu.model_copy(deep=True) for fu in self._items.values() if fu.owner_id == owner_id]

    async def list_for_prospect(self, owner_id: str, prospect_id: str) -> list[FollowUp]:
        return [
            fu.model_copy(deep=True) for fu in self._items.values()
            if fu.owner_id == owner_id and fu.prospect_id == prospect_id
        ]

    async def add(self, follow_up: FollowUp) -> None:
        if follow_up.id in self._items:
            raise ValueError(f"Follow-up {follow_up.id} already exists")
        self._items[follow_up.id] = follow_up.model_copy(deep=True)

    async def save(self, follow_up: FollowUp) -> None:
        if self._owned(follow_up.owner_id, follow_up.id) is None:
            raise KeyError(follow_up.id)
        self._items[follow_up.id] = follow_up.model_copy(deep=True)

    async def delete(self, owner_id: str, follow_up_id: str) -> None:
        if self._owned(owner_id, follow_up_id) is not None:
            del self._items[follow_up_id]

    async def delete_for_prospect(self, owner_id: str, prospect_id: str) -> int:
        doomed = [
            fid for fid, fu in self._items.items()
            if fu.owner_id == owner_id and fu.prospect_id == prospect_id
        ]
        for fid in doomed:
            del self._items[fid]
        return len(doomed)
