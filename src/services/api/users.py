"""
用户 API 服务
"""

from __future__ import annotations

from typing import Any

from src.models.api import (
    BatchDeleteRequest,
    PasswordReset,
    StatusUpdate,
    UserCreate,
    UserUpdate,
)
from src.services.api.base import BaseApiService

USERS_ENDPOINT = "/myapp/users"


class UserApiService(BaseApiService):
    """用户相关的所有 API 方法"""

    async def get_users(self) -> list[dict[str, Any]]:
        return await self.get(USERS_ENDPOINT)

    async def get_user_by_id(self, user_id: int) -> dict[str, Any]:
        return await self.get(f"{USERS_ENDPOINT}/{user_id}")

    async def create_user(self, data: UserCreate | dict[str, Any]) -> Any:
        return await self.post(USERS_ENDPOINT, data)

    async def update_user(self, user_id: int, data: UserUpdate | dict[str, Any]) -> Any:
        return await self.put(f"{USERS_ENDPOINT}/{user_id}", data)

    async def delete_user(self, user_id: int) -> Any:
        return await self.delete(f"{USERS_ENDPOINT}/{user_id}")

    async def batch_delete_users(self, ids: list[int]) -> Any:
        return await self.post(f"{USERS_ENDPOINT}/batch-delete", BatchDeleteRequest(ids=ids))

    async def update_user_status(self, user_id: int, status: int) -> Any:
        return await self.patch(f"{USERS_ENDPOINT}/{user_id}/status", StatusUpdate(status=status))

    async def reset_user_password(self, user_id: int, new_password: str) -> Any:
        return await self.patch(
            f"{USERS_ENDPOINT}/{user_id}/password", PasswordReset(password=new_password)
        )
