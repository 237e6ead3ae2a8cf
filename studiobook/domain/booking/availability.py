"""
Availability resolver
Keeps the member list for one event's window in sync with the backend.

The backend decides who is free; the resolver only trusts its
availabilityStatus and conflicts. Each window change bumps a generation
counter so a late answer for an older window is dropped instead of replacing
the list for the current one.
"""

import logging
from typing import Dict, List, Optional

from ...schemas import AvailabilityData, AvailableMember, Conflict
from ...services.member_service import MemberService, format_conflicts
from .schemas import AvailabilityWindow

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """Availability snapshot for a single event"""

    def __init__(self, member_service: MemberService, company_id: str, exclude_project_id: Optional[str] = None):
        self.member_service = member_service
        self.company_id = company_id
        self.exclude_project_id = exclude_project_id

        self.window: Optional[AvailabilityWindow] = None
        self.data: Optional[AvailabilityData] = None
        self.is_loading = False
        self.error: Optional[str] = None
        self._generation = 0
        self._cache: Dict[AvailabilityWindow, AvailabilityData] = {}

    @property
    def members(self) -> List[AvailableMember]:
        return list(self.data.availableMembers) if self.data else []

    @property
    def counts(self) -> Dict[str, int]:
        if not self.data:
            return {"fully": 0, "partially": 0, "unavailable": 0, "total": 0}
        return {
            "fully": self.data.totalFullyAvailable,
            "partially": self.data.totalPartiallyAvailable,
            "unavailable": self.data.totalUnavailable,
            "total": self.data.totalMembers,
        }

    async def load(self, window: AvailabilityWindow, force: bool = False) -> bool:
        """
        Fetch availability for ``window``.

        The current list is cleared and is_loading set before the request goes
        out. Answers for a window that is no longer current are discarded.

        Returns:
            True when this call left fresh data in place
        """
        self._generation += 1
        generation = self._generation
        self.window = window
        self.error = None

        if not window.date:
            self.data = None
            self.is_loading = False
            return False

        if not force and window in self._cache:
            self.data = self._cache[window]
            self.is_loading = False
            return True

        self.data = None
        self.is_loading = True

        result = await self.member_service.get_available_members(
            self.company_id,
            window.startHour,
            window.endHour,
            date=window.date,
            exclude_project_id=self.exclude_project_id,
        )

        if generation != self._generation or window != self.window:
            logger.debug(f"Discarding stale availability for {window.date} {window.startHour}-{window.endHour}")
            return False

        self.is_loading = False
        if not result.success:
            self.error = result.message or "Failed to fetch available members"
            logger.warning(f"⚠️ Availability fetch failed: {self.error}")
            return False

        self._cache[window] = result.data
        self.data = result.data
        return True

    def invalidate(self) -> None:
        """Forget everything, including any request still in flight"""
        self._generation += 1
        self._cache.clear()
        self.window = None
        self.data = None
        self.is_loading = False
        self.error = None

    def member(self, member_id: Optional[str]) -> Optional[AvailableMember]:
        for m in self.members:
            if m.id == member_id:
                return m
        return None

    def has_conflicts(self, member_id: Optional[str]) -> bool:
        member = self.member(member_id)
        return bool(member and member.availabilityStatus == "unavailable")

    def is_partially_available(self, member_id: Optional[str]) -> bool:
        member = self.member(member_id)
        return bool(member and member.availabilityStatus == "partially_available")

    def is_selectable(self, member_id: Optional[str]) -> bool:
        member = self.member(member_id)
        return member is not None and member.availabilityStatus != "unavailable"

    def conflicts_for(self, member_id: Optional[str]) -> List[Conflict]:
        member = self.member(member_id)
        return list(member.conflicts) if member else []

    def conflict_summary(self, member_id: Optional[str]) -> str:
        return format_conflicts(self.conflicts_for(member_id))
