"""
连接池

按源统计占用中的连接和可复用的热连接，执行同源与全局并发上限。
"""

from typing import Dict

from ..errors import SimulatorError


class ConnectionPool:
    """按源管理的连接池"""

    def __init__(self, max_concurrent_requests: int, max_connections_per_origin: int):
        self.max_concurrent_requests = max_concurrent_requests
        self.max_connections_per_origin = max_connections_per_origin
        self._active: Dict[str, int] = {}
        self._warm: Dict[str, int] = {}

    @property
    def total_active(self) -> int:
        return sum(self._active.values())

    def can_acquire(self, origin: str) -> bool:
        """是否还能为该源打开（或复用）一个连接"""
        if self.total_active >= self.max_concurrent_requests:
            return False
        return self._active.get(origin, 0) < self.max_connections_per_origin

    def acquire(self, origin: str) -> bool:
        """
        占用一个连接

        Returns:
            是否复用了已建立的热连接
        """
        if not self.can_acquire(origin):
            raise SimulatorError(f"No connection available for {origin}")

        self._active[origin] = self._active.get(origin, 0) + 1
        warm = self._warm.get(origin, 0)
        if warm > 0:
            self._warm[origin] = warm - 1
            return True
        return False

    def release(self, origin: str) -> None:
        """释放连接，连接保持为热连接供后续复用"""
        active = self._active.get(origin, 0)
        if active <= 0:
            raise SimulatorError(f"Releasing idle connection for {origin}")
        self._active[origin] = active - 1
        self._warm[origin] = self._warm.get(origin, 0) + 1
