"""Role lookup service - resolves company roles for display"""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from ..schemas import ApiResult, Role
from .api_client import BackendClient

logger = logging.getLogger(__name__)


def extract_roles(payload: Any) -> List[dict]:
    """
    Find the role list in a roles payload.

    The endpoint has answered with a bare list, ``{"roles": [...]}`` and the
    same nested one or two ``data`` levels deep; all of them end up here.
    """
    current = payload
    for _ in range(3):
        if isinstance(current, list):
            return current
        if not isinstance(current, dict):
            return []
        if isinstance(current.get("roles"), list):
            return current["roles"]
        current = current.get("data")
    return current if isinstance(current, list) else []


class RoleService:
    """Read-only access to a company's roles"""

    def __init__(self, client: BackendClient):
        self.client = client
        self._roles: List[Role] = []

    @property
    def roles(self) -> List[Role]:
        return list(self._roles)

    async def get_company_roles(self, company_id: str) -> ApiResult:
        """Fetch roles; data is a list of Role on success"""
        result = await self.client.post("/roles/company", json={"companyId": company_id})
        if not result.success:
            result.message = result.message or "Failed to load roles"
            return result

        roles = []
        for raw in extract_roles(result.data):
            try:
                roles.append(Role.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping malformed role {raw!r}: {e}")

        self._roles = roles
        result.data = roles
        logger.info(f"✅ Loaded {len(roles)} roles for company {company_id}")
        return result

    def role_name(self, role_id: Optional[str]) -> Optional[str]:
        """Resolve a role id to its display name"""
        for role in self._roles:
            if role.id == role_id:
                return role.name
        return None

    def role_id_for_name(self, name: Optional[str]) -> Optional[str]:
        """Resolve a display name back to a role id"""
        if not name:
            return None
        for role in self._roles:
            if role.name == name:
                return role.id
        return None
