"""
myapp-api 客户端模块

提供请求分发相关的组件：
- BaseApiService: 基础服务，负责配置合并、拦截器执行与错误归一化
- RequestDispatcher: 双通道分发器，中继优先，不可用时回退直连
- InterceptorChain: 请求/响应拦截器链
- DeadlineController: 直连路径的截止时间控制
- UserApiService / RoleApiService / PermissionApiService / MyAppApiService: 业务服务
"""

from src.core.exceptions import (
    ApiError,
    ApiErrorKind,
    BusinessFailureError,
    HttpFailureError,
    RelayFailureError,
    RequestTimeoutError,
    TransportExceptionError,
)
from src.services.api.base import BaseApiService
from src.services.api.dispatcher import (
    DispatchResult,
    RelayAttempt,
    RelayOutcome,
    RequestDispatcher,
    TransportKind,
)
from src.services.api.interceptors import (
    InterceptorChain,
    bearer_auth_interceptor,
    request_logging_interceptor,
    static_headers_interceptor,
    unwrap_envelope_interceptor,
)
from src.services.api.myapp import (
    MyAppApiService,
    close_myapp_api_service,
    get_myapp_api_service,
)
from src.services.api.permissions import PermissionApiService
from src.services.api.roles import RoleApiService
from src.services.api.timeout import AbortSignal, DeadlineController
from src.services.api.transports import (
    DirectTransport,
    IpcRelayChannel,
    RelayChannel,
    UnavailableRelayChannel,
)
from src.services.api.types import (
    HttpMethod,
    RelayEnvelope,
    RelayResult,
    RequestConfig,
    RequestDescriptor,
    ResponseMetadata,
)
from src.services.api.users import UserApiService

__all__ = [
    # 错误
    "ApiError",
    "ApiErrorKind",
    "BusinessFailureError",
    "HttpFailureError",
    "RelayFailureError",
    "RequestTimeoutError",
    "TransportExceptionError",
    # 数据结构
    "HttpMethod",
    "RelayEnvelope",
    "RelayResult",
    "RequestConfig",
    "RequestDescriptor",
    "ResponseMetadata",
    # 分发
    "AbortSignal",
    "DeadlineController",
    "DirectTransport",
    "DispatchResult",
    "IpcRelayChannel",
    "RelayAttempt",
    "RelayChannel",
    "RelayOutcome",
    "RequestDispatcher",
    "TransportKind",
    "UnavailableRelayChannel",
    # 拦截器
    "InterceptorChain",
    "bearer_auth_interceptor",
    "request_logging_interceptor",
    "static_headers_interceptor",
    "unwrap_envelope_interceptor",
    # 业务服务
    "BaseApiService",
    "MyAppApiService",
    "PermissionApiService",
    "RoleApiService",
    "UserApiService",
    "close_myapp_api_service",
    "get_myapp_api_service",
]
