# order_intake/infrastructure/rate_limiting/in_memory_rate_limiter.py
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from order_intake.domain.interfaces import RateLimiter, RateLimitDecision

UNKNOWN_CLIENT = "unknown"


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter(RateLimiter):
    """
    Limitador de ventana fija guardado en la memoria del proceso.

    Cada IP tiene un contador y el instante en que expira su ventana. Las
    entradas vencidas se eliminan de forma perezosa, como máximo una vez por
    `cleanup_interval`, durante las propias llamadas.

    El límite es por instancia: varios procesos no comparten contadores.
    Las claves vacías comparten el cubo "unknown".
    """

    def __init__(self, max_per_window: int = 5, window_seconds: float = 600,
                 cleanup_interval: float = 300, clock: Callable[[], float] = time.monotonic):
        self.max_per_window = max_per_window
        self.window_seconds = window_seconds
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def check_and_consume(self, key: str) -> RateLimitDecision:
        key = key or UNKNOWN_CLIENT
        with self._lock:
            now = self._clock()
            self._cleanup(now)

            window = self._windows.get(key)
            if window is None or window.reset_at <= now:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return RateLimitDecision(
                    allowed=True,
                    remaining=self.max_per_window - 1,
                    reset_in=self.window_seconds,
                )

            if window.count >= self.max_per_window:
                return RateLimitDecision(allowed=False, remaining=0, reset_in=window.reset_at - now)

            window.count += 1
            return RateLimitDecision(
                allowed=True,
                remaining=self.max_per_window - window.count,
                reset_in=window.reset_at - now,
            )

    def _cleanup(self, now: float) -> None:
        if now - self._last_cleanup <= self.cleanup_interval:
            return
        expired = [key for key, window in self._windows.items() if window.reset_at <= now]
        for key in expired:
            del self._windows[key]
        self._last_cleanup = now

    def __len__(self) -> int:
        return len(self._windows)
