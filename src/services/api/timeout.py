"""
超时 / 取消控制器

只约束直连路径：设置了 timeout_ms 时，在分发开始时启动定时器，
到期触发中止信号并取消进行中的直连请求；请求先完成则撤销定时器。
中继路径只在信封中转发 timeout 字段，由宿主侧自行执行。
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable
from typing import Any, TypeVar

from src.core.exceptions import RequestAbortedError

T = TypeVar("T")


class AbortSignal:
    """可被触发一次的中止信号"""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    def abort(self, reason: str = "aborted") -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class DeadlineController:
    """
    截止时间控制器

    用法:
        controller = DeadlineController(timeout_ms)
        async with controller:
            response = await controller.run(send(url, descriptor, controller.signal))
    """

    def __init__(self, timeout_ms: int | None) -> None:
        if timeout_ms is not None and timeout_ms < 0:
            raise ValueError(f"timeout_ms 不能为负数: {timeout_ms}")
        self.timeout_ms = timeout_ms
        self.signal = AbortSignal()
        self._handle: asyncio.TimerHandle | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        """启动定时器（timeout_ms 未设置或为 0 时不做任何事）"""
        if not self.timeout_ms or self._handle is not None:
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(
            self.timeout_ms / 1000, self.signal.abort, "deadline exceeded"
        )

    def disarm(self) -> None:
        """撤销定时器，不留下残余的定时任务"""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def __aenter__(self) -> DeadlineController:
        self.arm()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.disarm()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        在截止时间内等待 awaitable 完成

        中止信号先触发时取消该任务并抛出 RequestAbortedError。
        """
        task = asyncio.ensure_future(awaitable)
        if not self.timeout_ms:
            return await task

        waiter = asyncio.ensure_future(self.signal.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        task.cancel()
        # 被取消的请求即使以其他异常结束，也以中止为准
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await task
        raise RequestAbortedError(self.signal.reason or "aborted")
