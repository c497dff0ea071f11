"""
myapp-api 请求体模型

facade 的写操作接受这些模型或等价的 dict；序列化时省略值为 None 的字段。
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


# 配置允许额外字段，后端新增字段时调用方可直接透传
class BaseModelWithExtras(BaseModel):
    model_config = ConfigDict(extra="allow")


# ============================================================================
# 写操作请求体（创建 / 更新时 id 与时间戳由后端生成）
# ============================================================================


class UserCreate(BaseModelWithExtras):
    username: str
    password: str | None = None
    email: str | None = None
    phone: str | None = None
    nickname: str | None = None
    real_name: str | None = None
    gender: int | None = None
    birthday: str | None = None
    avatar: str | None = None
    status: int = 1


class UserUpdate(BaseModelWithExtras):
    username: str | None = None
    email: str | None = None
    phone: str | None = None
    nickname: str | None = None
    real_name: str | None = None
    gender: int | None = None
    birthday: str | None = None
    avatar: str | None = None
    status: int | None = None


class RoleCreate(BaseModelWithExtras):
    name: str
    code: str
    description: str | None = None
    status: int = 1


class RoleUpdate(BaseModelWithExtras):
    name: str | None = None
    code: str | None = None
    description: str | None = None
    status: int | None = None


class PermissionCreate(BaseModelWithExtras):
    name: str
    code: str
    type: int
    parent_id: int = 0
    path: str | None = None
    method: str | None = None
    description: str | None = None
    status: int = 1


class PermissionUpdate(BaseModelWithExtras):
    name: str | None = None
    code: str | None = None
    type: int | None = None
    parent_id: int | None = None
    path: str | None = None
    method: str | None = None
    description: str | None = None
    status: int | None = None


class BatchDeleteRequest(BaseModel):
    ids: list[int]


class BatchStatusRequest(BaseModel):
    ids: list[int]
    status: int


class StatusUpdate(BaseModel):
    status: int


class PasswordReset(BaseModel):
    password: str


class AssignRolesRequest(BaseModel):
    user_id: int
    role_ids: list[int]


class AssignPermissionsRequest(BaseModel):
    role_id: int
    permission_ids: list[int]


__all__ = [
    "AssignPermissionsRequest",
    "AssignRolesRequest",
    "BaseModelWithExtras",
    "BatchDeleteRequest",
    "BatchStatusRequest",
    "PasswordReset",
    "PermissionCreate",
    "PermissionUpdate",
    "RoleCreate",
    "RoleUpdate",
    "StatusUpdate",
    "UserCreate",
    "UserUpdate",
]
