"""
角色 API 服务
"""

from __future__ import annotations

from typing import Any

from src.models.api import (
    AssignPermissionsRequest,
    BatchDeleteRequest,
    RoleCreate,
    RoleUpdate,
    StatusUpdate,
)
from src.services.api.base import BaseApiService

ROLES_ENDPOINT = "/myapp/roles"
ROLE_PERMISSIONS_ENDPOINT = "/myapp/role-permissions"


class RoleApiService(BaseApiService):
    """角色相关的所有 API 方法"""

    async def get_roles(self) -> list[dict[str, Any]]:
        return await self.get(ROLES_ENDPOINT)

    async def get_role_by_id(self, role_id: int) -> dict[str, Any]:
        return await self.get(f"{ROLES_ENDPOINT}/{role_id}")

    async def create_role(self, data: RoleCreate | dict[str, Any]) -> Any:
        return await self.post(ROLES_ENDPOINT, data)

    async def update_role(self, role_id: int, data: RoleUpdate | dict[str, Any]) -> Any:
        return await self.put(f"{ROLES_ENDPOINT}/{role_id}", data)

    async def delete_role(self, role_id: int) -> Any:
        return await self.delete(f"{ROLES_ENDPOINT}/{role_id}")

    async def batch_delete_roles(self, ids: list[int]) -> Any:
        return await self.post(f"{ROLES_ENDPOINT}/batch-delete", BatchDeleteRequest(ids=ids))

    async def update_role_status(self, role_id: int, status: int) -> Any:
        return await self.patch(f"{ROLES_ENDPOINT}/{role_id}/status", StatusUpdate(status=status))

    async def get_role_permissions(self, role_id: int) -> list[dict[str, Any]]:
        return await self.get(f"{ROLES_ENDPOINT}/{role_id}/permissions")

    async def assign_permissions_to_role(self, role_id: int, permission_ids: list[int]) -> Any:
        return await self.post(
            ROLE_PERMISSIONS_ENDPOINT,
            AssignPermissionsRequest(role_id=role_id, permission_ids=permission_ids),
        )
