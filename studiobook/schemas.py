"""Backend wire schemas - Pydantic models for requests and responses"""

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .shared.validators import is_blank, validate_email, validate_mobile

AvailabilityStatus = Literal["fully_available", "partially_available", "unavailable"]
SectionType = Literal["brief", "logistics"]
ContentType = Literal["text", "list"]


class ApiResult(BaseModel):
    """Normalized envelope returned by every backend call"""

    success: bool
    message: Optional[str] = None
    statusCode: Optional[int] = None
    errors: Optional[Any] = None
    data: Optional[Any] = None

    @classmethod
    def failure(cls, message: str, status_code: Optional[int] = None, errors: Any = None) -> "ApiResult":
        return cls(success=False, message=message, statusCode=status_code, errors=errors)

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None, status_code: Optional[int] = 200) -> "ApiResult":
        return cls(success=True, message=message, statusCode=status_code, data=data)


# ============================================================================
# AVAILABILITY
# ============================================================================


class Conflict(BaseModel):
    projectId: str
    projectName: str
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    startHour: Optional[Union[int, str]] = None
    endHour: Optional[Union[int, str]] = None
    conflictType: Literal["date_and_time", "date_only"] = "date_and_time"


class AvailableMember(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    roleId: Optional[str] = None
    availabilityStatus: AvailabilityStatus = "fully_available"
    conflicts: List[Conflict] = Field(default_factory=list)

    @field_validator("conflicts", mode="before")
    @classmethod
    def default_conflicts(cls, v):
        return v or []


class AvailabilityDateRange(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    startHour: Optional[Union[int, str]] = None
    endHour: Optional[Union[int, str]] = None


class AvailabilityData(BaseModel):
    availableMembers: List[AvailableMember] = Field(default_factory=list)
    totalFullyAvailable: int = 0
    totalPartiallyAvailable: int = 0
    totalUnavailable: int = 0
    totalMembers: int = 0
    dateRange: Optional[AvailabilityDateRange] = None


class AvailabilityRequest(BaseModel):
    companyId: str
    date: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    startHour: int
    endHour: int
    excludeProjectId: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if not self.date and not (self.startDate and self.endDate):
            raise ValueError("Either date or startDate and endDate are required")
        return self


# ============================================================================
# SECTIONS
# ============================================================================


class Section(BaseModel):
    """Ordered, typed content block of a project's brief or logistics"""

    id: int
    type: ContentType = "text"
    title: str = ""
    content: Union[str, List[str]] = ""
    order: int = 0

    @model_validator(mode="after")
    def match_content_to_type(self):
        if self.type == "list" and isinstance(self.content, str):
            self.content = [self.content] if self.content else [""]
        elif self.type == "text" and isinstance(self.content, list):
            self.content = "\n".join(self.content)
        return self


class ProjectSections(BaseModel):
    brief: List[Section] = Field(default_factory=list)
    logistics: List[Section] = Field(default_factory=list)


# ============================================================================
# PROJECTS, EVENTS, ROLES
# ============================================================================


class Reminders(BaseModel):
    weekBefore: bool = True
    dayBefore: bool = True


class ClientInfo(BaseModel):
    """Schema for the optional client contact of a project"""

    name: str
    email: str
    mobile: str
    cc: Optional[str] = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if is_blank(v):
            raise ValueError("Client name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: str) -> str:
        if is_blank(v):
            raise ValueError("Client email is required")
        return validate_email(v)

    @field_validator("mobile")
    @classmethod
    def validate_mobile_field(cls, v: str) -> str:
        if is_blank(v):
            raise ValueError("Client mobile is required")
        return validate_mobile(v)


class Role(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    companyId: Optional[str] = None


class MemberRef(BaseModel):
    id: str
    name: str
    email: Optional[str] = None


class RoleRef(BaseModel):
    id: str
    name: str


class ProjectAssignment(BaseModel):
    id: Optional[str] = None
    instructions: Optional[str] = ""
    member: MemberRef
    role: Optional[RoleRef] = None


class ProjectEvent(BaseModel):
    id: str
    projectId: Optional[str] = None
    name: str
    date: Optional[str] = None
    startHour: int
    endHour: int
    location: Optional[str] = None
    reminders: Reminders = Field(default_factory=Reminders)
    assignments: List[ProjectAssignment] = Field(default_factory=list)


class CompanyRef(BaseModel):
    id: str
    name: Optional[str] = None


class ProjectDetail(BaseModel):
    id: str
    name: str
    color: Optional[str] = None
    description: Optional[str] = None
    client: Optional[dict] = None
    company: Optional[CompanyRef] = None
    events: List[ProjectEvent] = Field(default_factory=list)
    assignments: List[ProjectAssignment] = Field(default_factory=list)
    brief: List[Section] = Field(default_factory=list)
    logistics: List[Section] = Field(default_factory=list)
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @field_validator("events", "assignments", "brief", "logistics", mode="before")
    @classmethod
    def default_lists(cls, v):
        return v or []


class EventAssignmentRequest(BaseModel):
    memberId: str
    roleId: str
    instructions: str = ""


class CreateEventRequest(BaseModel):
    projectId: str
    name: str
    date: str
    startHour: int
    endHour: int
    location: str
    reminders: Reminders = Field(default_factory=Reminders)
    assignments: List[EventAssignmentRequest] = Field(default_factory=list)


class UpdateEventRequest(BaseModel):
    name: Optional[str] = None
    date: Optional[str] = None
    startHour: Optional[int] = None
    endHour: Optional[int] = None
    location: Optional[str] = None
    reminders: Optional[Reminders] = None
    assignments: Optional[List[EventAssignmentRequest]] = None


class EditProjectRequest(BaseModel):
    """Partial project update; an explicit client=None removes the client"""

    projectId: str
    name: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
    client: Optional[ClientInfo] = None
    isScheduleUpdate: Optional[bool] = None


class ProjectEventRequest(BaseModel):
    """One event inside a project create call"""

    name: str
    date: str
    startHour: int
    endHour: int
    location: str
    reminders: Reminders = Field(default_factory=Reminders)
    assignments: List[EventAssignmentRequest] = Field(default_factory=list)


class CreateProjectRequest(BaseModel):
    """Schema for creating a project together with all of its events"""

    name: str
    color: str
    description: str
    companyId: str
    events: List[ProjectEventRequest]
    client: Optional[ClientInfo] = None

    @field_validator("events")
    @classmethod
    def validate_events(cls, v: List[ProjectEventRequest]) -> List[ProjectEventRequest]:
        if not v:
            raise ValueError("At least one event is required")
        return v
