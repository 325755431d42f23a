"""通知（Toast）工具。

全局共享一个通知列表：show 追加并按需定时自动移除，dismiss 手动移除，
clear 清空。通知不做持久化。
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional

from chat_core.config.settings import settings


ToastType = Literal["success", "error", "info", "warning"]

# scheduler(delay_seconds, callback)；为 None 表示当前环境没有定时器
Scheduler = Callable[[float, Callable[[], None]], None]


@dataclass
class Toast:
    id: int
    title: str
    description: Optional[str]
    type: ToastType
    duration: float


def thread_timer_scheduler(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class ToastCenter:
    def __init__(
        self,
        scheduler: Optional[Scheduler] = thread_timer_scheduler,
        default_duration: Optional[float] = None,
    ):
        self._scheduler = scheduler
        self._default_duration = settings.toast_duration if default_duration is None else default_duration
        self._toasts: List[Toast] = []
        self._count = 0
        self._lock = threading.Lock()

    @property
    def toasts(self) -> List[Toast]:
        with self._lock:
            return list(self._toasts)

    @property
    def count(self) -> int:
        return self._count

    def show(
        self,
        title: str,
        description: Optional[str] = None,
        type: ToastType = "info",
        duration: Optional[float] = None,
    ) -> int:
        """追加一条通知并返回其 ID；duration 为 0 时不会自动消失。"""

        with self._lock:
            self._count += 1
            toast = Toast(
                id=self._count,
                title=title,
                description=description,
                type=type,
                duration=self._default_duration if duration is None else duration,
            )
            self._toasts.append(toast)

        if self._scheduler is not None and toast.duration > 0:
            toast_id = toast.id
            self._scheduler(toast.duration, lambda: self.dismiss(toast_id))
        return toast.id

    def dismiss(self, toast_id: int) -> None:
        with self._lock:
            for i, toast in enumerate(self._toasts):
                if toast.id == toast_id:
                    del self._toasts[i]
                    return

    def clear(self) -> None:
        with self._lock:
            self._toasts = []


_shared: Optional[ToastCenter] = None
_shared_lock = threading.Lock()


def use_toast() -> ToastCenter:
    """返回进程内共享的 ToastCenter（单例）。"""
    global _shared
    with _shared_lock:
        if _shared is None:
            _shared = ToastCenter()
        return _shared
