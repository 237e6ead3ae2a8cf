"""Backend API services - one thin client per resource on top of BackendClient"""

from .api_client import BackendClient
from .event_service import EventService
from .member_service import MemberService
from .project_service import ProjectService
from .role_service import RoleService
from .section_service import SectionService

__all__ = [
    "BackendClient",
    "EventService",
    "MemberService",
    "ProjectService",
    "RoleService",
    "SectionService",
]
