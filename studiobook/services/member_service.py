"""
Member availability service
Asks the backend which company members are free in a date/time window.
Conflict detection happens server side; this module only parses the answer.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from ..schemas import ApiResult, AvailabilityData, AvailabilityRequest, Conflict
from ..shared.validators import first_error_message
from .api_client import BackendClient

logger = logging.getLogger(__name__)


class MemberService:
    """Client for the member endpoints used by the booking builder"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_available_members(
        self,
        company_id: str,
        start_hour: int,
        end_hour: int,
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        exclude_project_id: Optional[str] = None,
    ) -> ApiResult:
        """
        Fetch members classified by availability for a window.

        Either a single ``date`` or a ``start_date``/``end_date`` range is sent.

        Returns:
            ApiResult whose data is an AvailabilityData on success
        """
        try:
            request = AvailabilityRequest(
                companyId=company_id,
                date=date,
                startDate=start_date,
                endDate=end_date,
                startHour=start_hour,
                endHour=end_hour,
                excludeProjectId=exclude_project_id,
            )
        except ValidationError as e:
            return ApiResult.failure(first_error_message(e))

        logger.info(
            f"🔄 Checking availability for company {company_id} on "
            f"{date or f'{start_date}..{end_date}'} {start_hour}-{end_hour}"
        )
        result = await self.client.post("/member/available", json=request.model_dump(exclude_none=True))
        if not result.success:
            result.message = result.message or "Failed to fetch available members"
            return result

        try:
            result.data = AvailabilityData.model_validate(result.data or {})
        except ValidationError as e:
            logger.error(f"❌ Malformed availability response: {e}")
            return ApiResult.failure("Malformed availability response", status_code=result.statusCode)

        logger.info(
            f"✅ {result.data.totalFullyAvailable} fully / {result.data.totalPartiallyAvailable} partially "
            f"/ {result.data.totalUnavailable} unavailable of {result.data.totalMembers}"
        )
        return result


def format_conflicts(conflicts: List[Conflict]) -> str:
    """Render conflicts as a comma-separated summary"""
    return ", ".join(f"{c.projectName} ({c.startDate} to {c.endDate})" for c in conflicts)
