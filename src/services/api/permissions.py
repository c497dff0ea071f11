"""
权限 API 服务
"""

from __future__ import annotations

from typing import Any

from src.models.api import (
    BatchDeleteRequest,
    BatchStatusRequest,
    PermissionCreate,
    PermissionUpdate,
    StatusUpdate,
)
from src.services.api.base import BaseApiService

PERMISSIONS_ENDPOINT = "/myapp/permissions"


class PermissionApiService(BaseApiService):
    """权限相关的所有 API 方法"""

    async def get_permissions(self) -> list[dict[str, Any]]:
        return await self.get(PERMISSIONS_ENDPOINT)

    async def get_permission_by_id(self, permission_id: int) -> dict[str, Any]:
        return await self.get(f"{PERMISSIONS_ENDPOINT}/{permission_id}")

    async def create_permission(self, data: PermissionCreate | dict[str, Any]) -> Any:
        return await self.post(PERMISSIONS_ENDPOINT, data)

    async def update_permission(
        self, permission_id: int, data: PermissionUpdate | dict[str, Any]
    ) -> Any:
        return await self.put(f"{PERMISSIONS_ENDPOINT}/{permission_id}", data)

    async def delete_permission(self, permission_id: int) -> Any:
        return await self.delete(f"{PERMISSIONS_ENDPOINT}/{permission_id}")

    async def batch_delete_permissions(self, ids: list[int]) -> Any:
        return await self.post(
            f"{PERMISSIONS_ENDPOINT}/batch-delete", BatchDeleteRequest(ids=ids)
        )

    async def update_permission_status(self, permission_id: int, status: int) -> Any:
        return await self.patch(
            f"{PERMISSIONS_ENDPOINT}/{permission_id}/status", StatusUpdate(status=status)
        )

    async def get_permission_tree(self) -> list[dict[str, Any]]:
        """获取权限树结构（子节点位于 children 字段）"""
        return await self.get(f"{PERMISSIONS_ENDPOINT}/tree")

    async def get_child_permissions(self, parent_id: int) -> list[dict[str, Any]]:
        return await self.get(f"{PERMISSIONS_ENDPOINT}/children/{parent_id}")

    async def batch_update_permission_status(self, ids: list[int], status: int) -> Any:
        return await self.patch(
            f"{PERMISSIONS_ENDPOINT}/batch-status", BatchStatusRequest(ids=ids, status=status)
        )
