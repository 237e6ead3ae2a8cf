"""
Draft booking builder
Two-step wizard that composes a project and its events before a single create
call. Step one collects the project and optional client; step two edits the
events, their time windows and the team assigned to each one.

The draft is only ever changed by user actions. A failed submit leaves it
exactly as it was so nothing the user typed is lost.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional

from ...exceptions import DraftStateError
from ...notifications import Notifier
from ...schemas import ApiResult, AvailableMember, ClientInfo, CreateProjectRequest, Reminders
from ...services.member_service import MemberService
from ...services.project_service import ProjectService
from ...services.role_service import RoleService
from ...shared.validators import (
    FIRST_HOUR,
    LAST_HOUR,
    is_blank,
    is_valid_email,
    is_valid_hour_window,
    is_valid_mobile,
)
from .availability import AvailabilityResolver
from .errors import ErrorMap, EventFieldScope, FieldScope, GlobalScope
from .schemas import AssignmentDraft, CurrentMember, EventDraft, ProjectDraft

logger = logging.getLogger(__name__)

PROJECT_FIELDS = ("projectName", "color", "description")
CLIENT_FIELDS = {"name": "clientName", "email": "clientEmail", "mobile": "clientMobile", "cc": "clientCc"}
EVENT_FIELDS = ("name", "date", "startHour", "endHour", "location", "reminders")

MEMBER_UNAVAILABLE = "Member Unavailable"


class WizardStep(IntEnum):
    PROJECT = 1
    EVENTS = 2


@dataclass
class MemberOption:
    """One entry of the member picker"""

    member: AvailableMember
    disabled: bool
    flagged: bool


class DraftBookingBuilder:
    """State machine behind the create-project dialog"""

    def __init__(
        self,
        project_service: ProjectService,
        member_service: MemberService,
        role_service: RoleService,
        notifier: Notifier,
        company_id: str,
        on_created: Optional[Callable[[Any], None]] = None,
    ):
        self.project_service = project_service
        self.member_service = member_service
        self.role_service = role_service
        self.notifier = notifier
        self.company_id = company_id
        self.on_created = on_created

        self.is_open = False
        self.is_submitting = False
        self._generation = 0
        self._reset()

    def _reset(self) -> None:
        # Bumped per draft so an in-flight submit can tell it was abandoned
        self._generation += 1
        self.draft = ProjectDraft()
        self.step = WizardStep.PROJECT
        self.selected_index = 0
        self.errors = ErrorMap()
        self.client_enabled = False
        self.current_member = CurrentMember()
        self.submit_error: Optional[str] = None
        self._resolvers: Dict[str, AvailabilityResolver] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Start a fresh draft and load the company roles once"""
        self._reset()
        self.is_open = True
        if not self.role_service.roles:
            result = await self.role_service.get_company_roles(self.company_id)
            if not result.success:
                logger.warning(f"⚠️ Roles unavailable, summaries will show raw role ids: {result.message}")

    def close(self) -> None:
        """Close by any path; the draft is discarded"""
        for resolver in self._resolvers.values():
            resolver.invalidate()
        self._reset()
        self.is_open = False
        self.is_submitting = False

    def cancel(self) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Step 1: project and client
    # ------------------------------------------------------------------

    def update_project(self, **fields: str) -> None:
        for name, value in fields.items():
            if name not in PROJECT_FIELDS:
                raise DraftStateError(f"Unknown project field: {name}")
            setattr(self.draft, name, value)
            self.errors.clear(FieldScope(name))

    def set_client_enabled(self, enabled: bool) -> None:
        self.client_enabled = enabled
        if not enabled:
            for key in CLIENT_FIELDS.values():
                self.errors.clear(FieldScope(key))

    def update_client(self, **fields: str) -> None:
        for name, value in fields.items():
            if name not in CLIENT_FIELDS:
                raise DraftStateError(f"Unknown client field: {name}")
            setattr(self.draft.client, name, value)
            self.errors.clear(FieldScope(CLIENT_FIELDS[name]))

    def validate_project_step(self) -> bool:
        """Check step one and fill the error map; no network involved"""
        self.errors.clear_fields()
        draft = self.draft

        if is_blank(draft.projectName):
            self.errors.set(FieldScope("projectName"), "Project name is required")
        if is_blank(draft.color):
            self.errors.set(FieldScope("color"), "Color is required")
        if is_blank(draft.description):
            self.errors.set(FieldScope("description"), "Description is required")

        if self.client_enabled:
            client = draft.client
            if is_blank(client.name):
                self.errors.set(FieldScope("clientName"), "Client name is required")
            if is_blank(client.email):
                self.errors.set(FieldScope("clientEmail"), "Client email is required")
            elif not is_valid_email(client.email):
                self.errors.set(FieldScope("clientEmail"), "Please enter a valid email address")
            if is_blank(client.mobile):
                self.errors.set(FieldScope("clientMobile"), "Client mobile is required")
            elif not is_valid_mobile(client.mobile):
                self.errors.set(FieldScope("clientMobile"), "Please enter a valid mobile number")

        return not self.errors.field_errors()

    async def next_step(self) -> bool:
        """Validate step one and move on to the events"""
        if self.step != WizardStep.PROJECT:
            return False
        if not self.validate_project_step():
            logger.info(f"ℹ️ Project step blocked: {self.errors.field_errors()}")
            return False

        self.step = WizardStep.EVENTS
        await self.refresh_availability(self.selected_index)
        return True

    def previous_step(self) -> None:
        self.step = WizardStep.PROJECT
        self.errors.clear_all()

    # ------------------------------------------------------------------
    # Step 2: events
    # ------------------------------------------------------------------

    @property
    def events(self) -> List[EventDraft]:
        return self.draft.events

    @property
    def selected_event(self) -> EventDraft:
        return self.draft.events[self.selected_index]

    def _event(self, index: int) -> EventDraft:
        if index < 0 or index >= len(self.draft.events):
            raise DraftStateError(f"No event at index {index}")
        return self.draft.events[index]

    def resolver_for(self, index: int) -> AvailabilityResolver:
        event = self._event(index)
        if event.id not in self._resolvers:
            self._resolvers[event.id] = AvailabilityResolver(self.member_service, self.company_id)
        return self._resolvers[event.id]

    @property
    def availability(self) -> AvailabilityResolver:
        return self.resolver_for(self.selected_index)

    def add_event(self) -> EventDraft:
        event = EventDraft(reminders=self.draft.reminders.model_copy())
        self.draft.events.append(event)
        self.selected_index = len(self.draft.events) - 1
        self.current_member = CurrentMember()
        return event

    def remove_event(self, index: int) -> bool:
        """Remove an event; the last remaining event can never be removed"""
        event = self._event(index)
        if len(self.draft.events) == 1:
            self.notifier.warning("At least one event is required")
            return False

        self.draft.events.pop(index)
        resolver = self._resolvers.pop(event.id, None)
        if resolver:
            resolver.invalidate()
        self.errors.drop_event(index)

        if self.selected_index >= index:
            self.selected_index = max(0, self.selected_index - 1)
        self.current_member = CurrentMember()
        return True

    def select_event(self, index: int) -> None:
        self._event(index)
        self.selected_index = index
        self.current_member = CurrentMember()

    def start_hour_options(self) -> List[int]:
        return list(range(FIRST_HOUR, LAST_HOUR))

    def end_hour_options(self, index: Optional[int] = None) -> List[int]:
        event = self._event(self.selected_index if index is None else index)
        return [h for h in range(FIRST_HOUR, LAST_HOUR + 1) if h > event.startHour]

    async def update_event(self, index: int, **fields: Any) -> None:
        """
        Change fields of one event.

        Moving the start hour to or past the end hour pushes the end hour to
        one hour after the start. Availability is refetched whenever the
        date/time window changed.
        """
        event = self._event(index)
        unknown = set(fields) - set(EVENT_FIELDS)
        if unknown:
            raise DraftStateError(f"Unknown event field(s): {sorted(unknown)}")

        before = event.window

        start = fields.get("startHour", event.startHour)
        end = fields.get("endHour", event.endHour)
        if start < FIRST_HOUR or start >= LAST_HOUR:
            raise DraftStateError(f"Start hour out of range: {start}")
        if "endHour" not in fields and end <= start:
            end = start + 1
        if end <= start or end > LAST_HOUR:
            raise DraftStateError(f"End hour {end} is not after start hour {start}")

        reminders = fields.get("reminders", event.reminders)
        if not isinstance(reminders, Reminders):
            reminders = Reminders(**reminders)

        event.startHour = start
        event.endHour = end

        for name in ("name", "date", "location"):
            if name in fields:
                setattr(event, name, fields[name])

        event.reminders = reminders

        for name in fields:
            self.errors.clear(EventFieldScope(index, name))
        if "startHour" in fields or "endHour" in fields:
            self.errors.clear(EventFieldScope(index, "time"))

        if event.window != before:
            if index == self.selected_index:
                self.current_member = CurrentMember()
            await self.refresh_availability(index)

    async def refresh_availability(self, index: Optional[int] = None) -> None:
        index = self.selected_index if index is None else index
        event = self._event(index)
        resolver = self.resolver_for(index)
        await resolver.load(event.window)

    # ------------------------------------------------------------------
    # Team staging
    # ------------------------------------------------------------------

    def member_options(self) -> List[MemberOption]:
        """Members of the current window not yet assigned to the selected event"""
        assigned = self.selected_event.assigned_member_ids()
        return [
            MemberOption(
                member=m,
                disabled=m.availabilityStatus == "unavailable",
                flagged=m.availabilityStatus == "partially_available",
            )
            for m in self.availability.members
            if m.id not in assigned
        ]

    def select_member(self, member_id: str) -> None:
        member = self.availability.member(member_id)
        if member is None:
            raise DraftStateError(f"Member {member_id} is not in the current availability list")

        role_id = member.roleId or self.role_service.role_id_for_name(member.role) or member.role
        self.current_member = CurrentMember(
            memberId=member.id,
            roleId=role_id,
            instructions=self.current_member.instructions,
        )

    def set_member_role(self, role_id: str) -> None:
        self.current_member.roleId = role_id

    def set_member_instructions(self, instructions: str) -> None:
        self.current_member.instructions = instructions

    @property
    def add_blocked_reason(self) -> Optional[str]:
        """Why the add button is disabled, or None when it is enabled"""
        current = self.current_member
        if self.availability.is_loading:
            return "Loading availability..."
        if not current.memberId or not current.roleId:
            return "Select a member and role"
        if current.memberId in self.selected_event.assigned_member_ids():
            return "Member already assigned"
        if self.availability.has_conflicts(current.memberId):
            return MEMBER_UNAVAILABLE
        return None

    def can_add_team_member(self) -> bool:
        return self.add_blocked_reason is None

    def add_team_member(self) -> bool:
        reason = self.add_blocked_reason
        if reason:
            logger.info(f"ℹ️ Add team member blocked: {reason}")
            return False

        current = self.current_member
        member = self.availability.member(current.memberId)
        self.selected_event.assignments.append(
            AssignmentDraft(
                memberId=current.memberId,
                roleId=current.roleId,
                instructions=current.instructions,
                memberName=member.name if member else None,
                roleName=self.role_name(current.roleId),
            )
        )
        self.errors.clear(EventFieldScope(self.selected_index, "assignments"))
        self.current_member = CurrentMember()
        return True

    def remove_team_member(self, member_id: str) -> bool:
        event = self.selected_event
        before = len(event.assignments)
        event.assignments = [a for a in event.assignments if a.memberId != member_id]
        return len(event.assignments) != before

    def update_assignment_instructions(self, member_id: str, instructions: str) -> None:
        assignment = self.selected_event.find_assignment(member_id)
        if assignment is None:
            raise DraftStateError(f"Member {member_id} is not assigned to this event")
        assignment.instructions = instructions

    def role_name(self, role_id: Optional[str]) -> Optional[str]:
        """Display name of a role, falling back to the raw id"""
        return self.role_service.role_name(role_id) or role_id

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def validate_events(self) -> bool:
        self.errors.clear_events()
        for index, event in enumerate(self.draft.events):
            if is_blank(event.name):
                self.errors.set(EventFieldScope(index, "name"), "Event name is required")
            if not event.date:
                self.errors.set(EventFieldScope(index, "date"), "Event date is required")
            if is_blank(event.location):
                self.errors.set(EventFieldScope(index, "location"), "Location is required")
            if not event.assignments:
                self.errors.set(EventFieldScope(index, "assignments"), "At least one team member is required")
            if not is_valid_hour_window(event.startHour, event.endHour):
                self.errors.set(EventFieldScope(index, "time"), "End time must be after start time")
        return not self.errors.event_indexes_with_errors()

    def build_request(self) -> CreateProjectRequest:
        """Flatten the draft into the create payload"""
        draft = self.draft
        client = None
        if self.client_enabled:
            client = ClientInfo(**draft.client.model_dump())
        return CreateProjectRequest(
            name=draft.projectName.strip(),
            color=draft.color,
            description=draft.description.strip(),
            companyId=self.company_id,
            events=[event.to_request() for event in draft.events],
            client=client,
        )

    async def submit(self) -> ApiResult:
        """Validate everything and create the project in one call"""
        if self.is_submitting:
            return ApiResult.failure("Submission already in progress")

        if not self.validate_project_step():
            self.step = WizardStep.PROJECT
            return ApiResult.failure("Please fix the project details")

        if not self.validate_events():
            first = self.errors.event_indexes_with_errors()[0]
            if first != self.selected_index:
                self.select_event(first)
            self.notifier.error("Please fix the highlighted event details")
            return ApiResult.failure("Please fix the highlighted event details")

        request = self.build_request()
        generation = self._generation
        self.is_submitting = True
        self.submit_error = None
        self.errors.clear(GlobalScope())
        try:
            result = await self.project_service.create_project(request)
        finally:
            if generation == self._generation:
                self.is_submitting = False

        if generation != self._generation:
            logger.info(f"ℹ️ Draft closed while creating '{request.name}', leaving the new draft alone")
            if result.success:
                self.notifier.success("Project created successfully")
                if self.on_created:
                    self.on_created(result.data)
            return result

        if not result.success:
            self.submit_error = result.message or "Failed to create project"
            self.errors.set(GlobalScope(), self.submit_error)
            self.notifier.error(self.submit_error)
            return result

        self.notifier.success("Project created successfully")
        callback = self.on_created
        self.close()
        if callback:
            callback(result.data)
        return result


