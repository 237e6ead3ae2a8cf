"""Event service - create, update and delete single events of a project"""

import logging
from typing import Any

from pydantic import ValidationError

from ..schemas import ApiResult, CreateEventRequest, UpdateEventRequest
from ..shared.validators import first_error_message, is_blank
from .api_client import BackendClient

logger = logging.getLogger(__name__)


class EventService:
    """Client for the event endpoints"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def create_event(self, request: CreateEventRequest) -> ApiResult:
        """Create an event after the same checks the form runs"""
        if is_blank(request.projectId):
            return ApiResult.failure("Project ID is required")
        if is_blank(request.name):
            return ApiResult.failure("Event name is required")
        if not request.date:
            return ApiResult.failure("Event date is required")
        if is_blank(request.location):
            return ApiResult.failure("Location is required")
        if request.startHour >= request.endHour:
            return ApiResult.failure("End time must be after start time")

        logger.info(f"📝 Creating event '{request.name}' for project {request.projectId}")
        result = await self.client.post("/event/add", json=request.model_dump())
        if not result.success:
            result.message = result.message or "Failed to create event"
        return result

    async def update_event(self, event_id: str, **updates: Any) -> ApiResult:
        """
        Update an event with partial fields.

        Fields left as None are stripped before sending so the backend keeps its
        current values for them.
        """
        if is_blank(event_id):
            return ApiResult.failure("Event ID is required")

        try:
            request = UpdateEventRequest(**updates)
        except ValidationError as e:
            return ApiResult.failure(first_error_message(e))

        if request.startHour is not None and request.endHour is not None:
            if request.startHour >= request.endHour:
                return ApiResult.failure("End time must be after start time")

        payload = request.model_dump(exclude_none=True)
        logger.info(f"📝 Updating event {event_id}: {sorted(payload)}")
        result = await self.client.put(f"/event/update/{event_id}", json=payload)
        if not result.success:
            result.message = result.message or "Failed to update event"
        return result

    async def delete_event(self, event_id: str) -> ApiResult:
        if is_blank(event_id):
            return ApiResult.failure("Event ID is required")

        logger.info(f"🗑️ Deleting event {event_id}")
        result = await self.client.delete("/event/delete", json={"eventId": event_id})
        if not result.success:
            result.message = result.message or "Failed to delete event"
        return result
