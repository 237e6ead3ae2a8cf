"""
Shared pytest fixtures for the studiobook test suite.

Provides:
    - session: Active SessionContext for company-1
    - notifier: Fresh Notifier per test
    - make_client: Builds a BackendClient over an httpx.MockTransport handler
    - members: Alice (free), Bob (partially free) and Carol (unavailable)
    - member_service: AsyncMock answering every window with ``members``
    - role_service: RoleService preloaded with the company roles
    - project_service: AsyncMock whose create_project succeeds
    - builder: DraftBookingBuilder wired to the fakes above
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from studiobook.domain.booking.builder import DraftBookingBuilder
from studiobook.notifications import Notifier
from studiobook.schemas import ApiResult, AvailabilityData, AvailableMember, Conflict, Role
from studiobook.services.api_client import BackendClient
from studiobook.services.role_service import RoleService
from studiobook.session import SessionContext

TEST_COMPANY_ID = "company-1"
TEST_TOKEN = "test-token"
TEST_BASE_URL = "http://backend.test"

ROLES = [
    Role(id="r1", name="Photographer"),
    Role(id="r2", name="Videographer"),
    Role(id="r3", name="Editor"),
]


def availability_result(members):
    """ApiResult shaped like a successful /member/available call"""
    statuses = [m.availabilityStatus for m in members]
    return ApiResult.ok(
        AvailabilityData(
            availableMembers=members,
            totalFullyAvailable=statuses.count("fully_available"),
            totalPartiallyAvailable=statuses.count("partially_available"),
            totalUnavailable=statuses.count("unavailable"),
            totalMembers=len(members),
        )
    )


# --- Fixtures ---


@pytest.fixture
def session():
    return SessionContext(token=TEST_TOKEN, company_id=TEST_COMPANY_ID)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def make_client(session):
    """Factory: make_client(handler) -> BackendClient talking to ``handler``"""

    def _make(handler, client_session=None):
        return BackendClient(
            client_session or session,
            base_url=TEST_BASE_URL,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def members():
    return [
        AvailableMember(id="m1", name="Alice", role="Photographer", roleId="r1"),
        AvailableMember(
            id="m2",
            name="Bob",
            role="Videographer",
            availabilityStatus="partially_available",
            conflicts=[
                Conflict(
                    projectId="p9",
                    projectName="Wedding",
                    startDate="2026-03-01",
                    endDate="2026-03-01",
                    conflictType="date_only",
                )
            ],
        ),
        AvailableMember(
            id="m3",
            name="Carol",
            role="Editor",
            roleId="r3",
            availabilityStatus="unavailable",
            conflicts=[
                Conflict(
                    projectId="p8",
                    projectName="Launch",
                    startDate="2026-03-01",
                    endDate="2026-03-02",
                )
            ],
        ),
    ]


@pytest.fixture
def member_service(members):
    service = MagicMock()
    service.get_available_members = AsyncMock(return_value=availability_result(members))
    return service


@pytest.fixture
def role_service():
    client = MagicMock()
    client.post = AsyncMock(return_value=ApiResult.ok({"roles": [r.model_dump() for r in ROLES]}))
    return RoleService(client)


@pytest.fixture
def project_service():
    service = MagicMock()
    service.create_project = AsyncMock(return_value=ApiResult.ok({"id": "new-project-id"}, message="Project created"))
    return service


@pytest.fixture
def builder(project_service, member_service, role_service, notifier):
    return DraftBookingBuilder(
        project_service,
        member_service,
        role_service,
        notifier,
        company_id=TEST_COMPANY_ID,
        on_created=MagicMock(),
    )
