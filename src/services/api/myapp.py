"""
MyApp 主 API 服务

组合用户、角色、权限服务，提供统一的 API 访问入口，
并负责用户-角色、角色-权限的关联管理。
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.config import config
from src.core.logger import logger
from src.models.api import AssignPermissionsRequest, AssignRolesRequest
from src.services.api.base import BaseApiService
from src.services.api.permissions import PermissionApiService
from src.services.api.roles import ROLE_PERMISSIONS_ENDPOINT, RoleApiService
from src.services.api.transports import DirectTransport, RelayChannel
from src.services.api.types import RequestInterceptor, ResponseInterceptor
from src.services.api.users import USERS_ENDPOINT, UserApiService

USER_ROLES_ENDPOINT = "/myapp/user-roles"


class MyAppApiService(BaseApiService):
    """
    MyApp 主 API 服务

    子服务与主服务共享同一组构造参数（base_url、中继通道、直连传输），
    但各自维护独立的拦截器链；需要统一生效的拦截器通过 add_shared_* 注册。
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        relay: RelayChannel | None = None,
        direct: DirectTransport | None = None,
        default_headers: Mapping[str, str] | None = None,
        default_timeout_ms: int | None = None,
        service_name: str | None = None,
    ) -> None:
        options: dict[str, Any] = {
            "relay": relay,
            # 主服务与子服务共用同一个直连传输
            "direct": direct or DirectTransport(),
            "default_headers": default_headers,
            "default_timeout_ms": default_timeout_ms,
            "service_name": service_name,
        }
        super().__init__(base_url, **options)

        # 初始化各个业务服务
        self.users = UserApiService(self.base_url, **options)
        self.roles = RoleApiService(self.base_url, **options)
        self.permissions = PermissionApiService(self.base_url, **options)

    @property
    def services(self) -> tuple[BaseApiService, ...]:
        return (self, self.users, self.roles, self.permissions)

    def add_shared_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        """为主服务及所有子服务添加请求拦截器"""
        for service in self.services:
            service.add_request_interceptor(interceptor)

    def add_shared_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        """为主服务及所有子服务添加响应拦截器"""
        for service in self.services:
            service.add_response_interceptor(interceptor)

    async def assign_roles_to_user(self, request: AssignRolesRequest | dict[str, Any]) -> Any:
        """为用户分配角色"""
        return await self.post(USER_ROLES_ENDPOINT, request)

    async def assign_permissions_to_role(
        self, request: AssignPermissionsRequest | dict[str, Any]
    ) -> Any:
        """为角色分配权限"""
        return await self.post(ROLE_PERMISSIONS_ENDPOINT, request)

    async def get_user_roles(self, user_id: int) -> list[dict[str, Any]]:
        return await self.get(f"{USERS_ENDPOINT}/{user_id}/roles")

    async def get_user_permissions(self, user_id: int) -> list[dict[str, Any]]:
        return await self.get(f"{USERS_ENDPOINT}/{user_id}/permissions")

    async def remove_roles_from_user(self, user_id: int, role_ids: list[int]) -> Any:
        """移除用户的角色（DELETE 携带请求体）"""
        return await self.delete(
            USER_ROLES_ENDPOINT, AssignRolesRequest(user_id=user_id, role_ids=role_ids)
        )

    async def remove_permissions_from_role(self, role_id: int, permission_ids: list[int]) -> Any:
        """移除角色的权限（DELETE 携带请求体）"""
        return await self.delete(
            ROLE_PERMISSIONS_ENDPOINT,
            AssignPermissionsRequest(role_id=role_id, permission_ids=permission_ids),
        )


_myapp_api_service: MyAppApiService | None = None


def get_myapp_api_service(relay: RelayChannel | None = None) -> MyAppApiService:
    """
    获取应用级 MyAppApiService 单例

    首次调用时创建；relay 为宿主提供的中继通道，
    MYAPP_RELAY_ENABLED=false 时忽略 relay，始终直连。
    """
    global _myapp_api_service
    if _myapp_api_service is None:
        effective_relay = relay if config.relay_enabled else None
        _myapp_api_service = MyAppApiService(config.api_base_url, relay=effective_relay)
        logger.info(
            "MyAppApiService 已初始化: base_url={}, relay={}",
            config.api_base_url,
            type(effective_relay).__name__ if effective_relay else "disabled",
        )
    return _myapp_api_service


async def close_myapp_api_service() -> None:
    """关闭应用级单例（应用退出时调用）；下次获取时重新创建"""
    global _myapp_api_service
    service = _myapp_api_service
    _myapp_api_service = None
    if service is not None:
        await service.aclose()
        logger.info("MyAppApiService 已关闭")
