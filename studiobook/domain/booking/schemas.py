"""Booking draft schemas - in-memory state of the project/event builder"""

from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ...config import DEFAULT_EVENT_START_HOUR
from ...schemas import EventAssignmentRequest, ProjectEventRequest, Reminders

# Keep the default window inside the day even if the configured hour is late
DEFAULT_START_HOUR = min(max(DEFAULT_EVENT_START_HOUR, 0), 23)


class AvailabilityWindow(BaseModel):
    """The (date, startHour, endHour) triple availability is fetched for"""

    model_config = ConfigDict(frozen=True)

    date: Optional[str] = None
    startHour: int
    endHour: int


class ClientDraft(BaseModel):
    name: str = ""
    email: str = ""
    mobile: str = ""
    cc: str = ""


class AssignmentDraft(BaseModel):
    """A member bound to a role for one event; names are for display only"""

    memberId: str
    roleId: str
    instructions: str = ""
    memberName: Optional[str] = None
    roleName: Optional[str] = None

    def to_request(self) -> EventAssignmentRequest:
        return EventAssignmentRequest(
            memberId=self.memberId,
            roleId=self.roleId,
            instructions=self.instructions,
        )


class EventDraft(BaseModel):
    # Client side only, never sent
    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = ""
    date: Optional[str] = None
    startHour: int = DEFAULT_START_HOUR
    endHour: int = DEFAULT_START_HOUR + 1
    location: str = ""
    reminders: Reminders = Field(default_factory=Reminders)
    assignments: List[AssignmentDraft] = Field(default_factory=list)

    @property
    def window(self) -> AvailabilityWindow:
        return AvailabilityWindow(date=self.date, startHour=self.startHour, endHour=self.endHour)

    def assigned_member_ids(self) -> set[str]:
        return {a.memberId for a in self.assignments}

    def find_assignment(self, member_id: str) -> Optional[AssignmentDraft]:
        for assignment in self.assignments:
            if assignment.memberId == member_id:
                return assignment
        return None

    def to_request(self) -> ProjectEventRequest:
        return ProjectEventRequest(
            name=self.name.strip(),
            date=self.date or "",
            startHour=self.startHour,
            endHour=self.endHour,
            location=self.location.strip(),
            reminders=self.reminders.model_copy(),
            assignments=[a.to_request() for a in self.assignments],
        )


class ProjectDraft(BaseModel):
    """Everything the builder collects before the single create call"""

    projectName: str = ""
    color: str = ""
    description: str = ""
    client: ClientDraft = Field(default_factory=ClientDraft)
    reminders: Reminders = Field(default_factory=Reminders)
    events: List[EventDraft] = Field(default_factory=lambda: [EventDraft()])


class CurrentMember(BaseModel):
    """Scratch selection for the member about to be added to an event"""

    memberId: Optional[str] = None
    roleId: Optional[str] = None
    instructions: str = ""
