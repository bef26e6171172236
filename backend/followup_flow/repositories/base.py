"""Repository interfaces for prospects and follow-ups.

Every read and delete is scoped to an owner; records carry their owner_id.
"""

from abc import ABC, abstractmethod
from typing import Optional

from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.prospect import Prospect


class ProspectRepository(ABC):
    """Prospects with their embedded interaction history.

    Implementations return copies; mutating a returned value never changes
    stored state until it is passed back through save().
    """

    @abstractmethod
    async def get(self, owner_id: str, prospect_id: str) -> Optional[Prospect]:
        ...

    @abstractmethod
    async def owners(self) -> list[str]:
        """Distinct owner ids with at least one prospect."""
        ...

    @abstractmethod
    async def list(self, owner_id: str) -> list[Prospect]:
        ...

    @abstractmethod
    async def add(self, prospect: Prospect) -> None:
        ...

    @abstractmethod
    async def save(self, prospect: Prospect) -> None:
        ...

    @abstractmethod
    async def delete(self, owner_id: str, prospect_id: str) -> None:
        ...


class FollowUpRepository(ABC):
    @abstractmethod
    async def get(self, owner_id: str, follow_up_id: str) -> Optional[FollowUp]:
        ...

    @abstractmethod
    async def list_all(self, owner_id: str) -> list[FollowUp]:
        ...

    @abstractmethod
    async def list_for_prospect(self, owner_id: str, prospect_id: str) -> list[FollowUp]:
        ...

    @abstractmethod
    async def add(self, follow_up: FollowUp) -> None:
        ...

    @abstractmethod
    async def save(self, follow_up: FollowUp) -> None:
        ...

    @abstractmethod
    async def delete(self, owner_id: str, follow_up_id: str) -> None:
        ...

    @abstractmethod
    async def delete_for_prospect(self, owner_id: str, prospect_id: str) -> int:
        ...
