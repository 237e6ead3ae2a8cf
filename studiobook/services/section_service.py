"""Section service - persists a project's brief and logistics collections"""

import logging
from typing import List, get_args

from pydantic import ValidationError

from ..schemas import ApiResult, ProjectSections, Section, SectionType
from ..shared.validators import is_blank
from .api_client import BackendClient

logger = logging.getLogger(__name__)

SECTION_TYPES = get_args(SectionType)


class SectionService:
    """Client for the project section endpoints"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_sections(self, project_id: str) -> ApiResult:
        """Fetch both collections; data is a ProjectSections on success"""
        if is_blank(project_id):
            return ApiResult.failure("Project ID is required")

        result = await self.client.get(f"/project/{project_id}/sections")
        if not result.success:
            result.message = result.message or "Failed to load sections"
            return result

        try:
            result.data = ProjectSections.model_validate(result.data or {})
        except ValidationError as e:
            logger.error(f"❌ Malformed sections for project {project_id}: {e}")
            return ApiResult.failure("Malformed sections response", status_code=result.statusCode)
        return result

    async def update_sections(self, project_id: str, section_type: str, sections: List[Section]) -> ApiResult:
        """
        Replace one collection with ``sections``.

        The whole collection is sent every time; the backend echoes back what it
        stored, which becomes ``data`` (a list of Section) on success.
        """
        if is_blank(project_id):
            return ApiResult.failure("Project ID is required")
        if section_type not in SECTION_TYPES:
            return ApiResult.failure(f"Invalid section type: {section_type}")

        payload = {
            "projectId": project_id,
            "sectionType": section_type,
            "sections": [section.model_dump() for section in sections],
        }
        logger.info(f"📝 Saving {len(sections)} {section_type} section(s) for project {project_id}")
        result = await self.client.put("/project/sections", json=payload)
        if not result.success:
            result.message = result.message or f"Failed to save {section_type}"
            return result

        echoed = result.data
        if isinstance(echoed, dict):
            echoed = echoed.get("sections", echoed.get(section_type))
        try:
            result.data = [Section.model_validate(s) for s in echoed] if isinstance(echoed, list) else list(sections)
        except ValidationError as e:
            logger.warning(f"⚠️ Could not parse echoed sections, keeping the sent ones: {e}")
            result.data = list(sections)
        return result
