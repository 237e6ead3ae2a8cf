"""Project service - project CRUD, name checks and membership"""

import logging
from typing import Any

from pydantic import ValidationError

from ..schemas import ApiResult, CreateProjectRequest, EditProjectRequest, ProjectDetail
from ..shared.validators import first_error_message, is_blank
from .api_client import BackendClient

logger = logging.getLogger(__name__)


class ProjectService:
    """Client for the project endpoints"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def create_project(self, request: CreateProjectRequest) -> ApiResult:
        """Create a project and its events in a single call"""
        logger.info(
            f"📥 Creating project '{request.name}' with {len(request.events)} event(s) "
            f"for company {request.companyId}"
        )
        result = await self.client.post("/project/add", json=request.model_dump(exclude_none=True))
        if not result.success:
            result.message = result.message or "Failed to create project"
            return result

        logger.info(f"✅ Project '{request.name}' created")
        return result

    async def get_project(self, project_id: str) -> ApiResult:
        """Fetch a project with its events, assignments and company"""
        if is_blank(project_id):
            return ApiResult.failure("Project ID is required")

        result = await self.client.get(f"/project/{project_id}")
        if not result.success:
            result.message = result.message or "Failed to load project"
            return result

        raw = result.data
        if isinstance(raw, dict) and isinstance(raw.get("project"), dict):
            raw = raw["project"]
        try:
            result.data = ProjectDetail.model_validate(raw or {})
        except ValidationError as e:
            logger.error(f"❌ Malformed project {project_id}: {e}")
            return ApiResult.failure("Malformed project response", status_code=result.statusCode)
        return result

    async def edit_project(self, project_id: str, **fields: Any) -> ApiResult:
        """
        Update project fields.

        Only the fields passed are sent. Passing ``client=None`` explicitly
        removes the client from the project; a client dict is validated with
        the same rules the booking form uses.
        """
        if is_blank(project_id):
            return ApiResult.failure("Project ID is required")

        try:
            request = EditProjectRequest(projectId=project_id, **fields)
        except ValidationError as e:
            message = first_error_message(e)
            logger.info(f"ℹ️ Rejected edit for project {project_id}: {message}")
            return ApiResult.failure(message)

        payload = request.model_dump(exclude_unset=True)
        logger.info(f"📝 Editing project {project_id}: {sorted(k for k in payload if k != 'projectId')}")
        result = await self.client.put("/project/edit", json=payload)
        if not result.success:
            result.message = result.message or "Failed to update project"
        return result

    async def delete_project(self, project_id: str) -> ApiResult:
        if is_blank(project_id):
            return ApiResult.failure("Project ID is required")

        logger.info(f"🗑️ Deleting project {project_id}")
        result = await self.client.delete("/project/delete", json={"projectId": project_id})
        if not result.success:
            result.message = result.message or "Failed to delete project"
        return result

    async def check_project_name(self, name: str, company_id: str) -> ApiResult:
        """Ask whether a project name is taken; data is True when it exists"""
        if is_blank(name):
            return ApiResult.failure("Project name is required")

        result = await self.client.post(
            "/project/check-name", json={"name": name.strip(), "companyId": company_id}
        )
        if not result.success:
            result.message = result.message or "Failed to check project name"
            return result

        result.data = bool(isinstance(result.data, dict) and result.data.get("exists"))
        return result

    async def add_member_to_project(self, project_id: str, member_id: str, role_id: str) -> ApiResult:
        if is_blank(project_id) or is_blank(member_id) or is_blank(role_id):
            return ApiResult.failure("Project, member and role are required")

        result = await self.client.post(
            "/project/add-member",
            json={"projectId": project_id, "memberId": member_id, "roleId": role_id},
        )
        if not result.success:
            result.message = result.message or "Failed to add member"
        return result

    async def remove_member_from_project(self, project_id: str, member_id: str) -> ApiResult:
        if is_blank(project_id) or is_blank(member_id):
            return ApiResult.failure("Project and member are required")

        result = await self.client.post(
            "/project/remove-member", json={"projectId": project_id, "memberId": member_id}
        )
        if not result.success:
            result.message = result.message or "Failed to remove member"
        return result
