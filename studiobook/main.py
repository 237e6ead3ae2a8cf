"""
Workspace wiring
Builds the session, backend client, services and editing controllers for one
signed-in user.
"""

import logging
from typing import Any, Callable, Dict, Optional

import httpx

from .config import LOG_LEVEL
from .domain.booking.builder import DraftBookingBuilder
from .domain.sections.editor import SectionEditor
from .notifications import Notifier
from .services import (
    BackendClient,
    EventService,
    MemberService,
    ProjectService,
    RoleService,
    SectionService,
)
from .session import SessionContext

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Reduce verbosity of third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class BookingWorkspace:
    """Everything one user needs to book projects and edit their sections"""

    def __init__(
        self,
        session: SessionContext,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        notifier: Optional[Notifier] = None,
        on_created: Optional[Callable[[Any], None]] = None,
    ):
        self.session = session
        self.notifier = notifier or Notifier()
        self.client = BackendClient(session, base_url=base_url, transport=transport)

        self.projects = ProjectService(self.client)
        self.events = EventService(self.client)
        self.members = MemberService(self.client)
        self.roles = RoleService(self.client)
        self.sections = SectionService(self.client)

        self.builder = DraftBookingBuilder(
            self.projects,
            self.members,
            self.roles,
            self.notifier,
            company_id=session.company_id,
            on_created=on_created,
        )
        self._editors: Dict[tuple, SectionEditor] = {}
        self._unsubscribe = session.on_logout(self._handle_logout)

    def section_editor(self, project_id: str, section_type: str, on_saved=None) -> SectionEditor:
        """Get (or create) the editor for one project collection"""
        key = (project_id, section_type)
        if key not in self._editors:
            self._editors[key] = SectionEditor(
                project_id,
                section_type,
                self.sections,
                self.notifier,
                on_saved=on_saved,
            )
        return self._editors[key]

    def _handle_logout(self, reason: str) -> None:
        # All client state goes with the session
        self.builder.close()
        self.builder.company_id = self.session.company_id
        self._editors.clear()
        self.notifier.error(reason)

    async def aclose(self) -> None:
        self._unsubscribe()
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


def create_workspace(
    token: str,
    company_id: str,
    user: Optional[dict] = None,
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    on_created: Optional[Callable[[Any], None]] = None,
) -> BookingWorkspace:
    """Create a workspace for a signed-in user"""
    session = SessionContext(token=token, company_id=company_id, user=user)
    logger.info(f"✅ Workspace ready for company {company_id}")
    return BookingWorkspace(session, base_url=base_url, transport=transport, on_created=on_created)
