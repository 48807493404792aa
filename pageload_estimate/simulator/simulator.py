"""
参考模拟器

离散事件调度：时间推进到下一个完成事件，随后尽可能多地启动已就绪节点。
结果只取决于图结构、节点数据和配置，可精确复现。
"""

import logging
from typing import Dict, List, Optional

from ..errors import SimulatorError
from ..graph.base import DependencyGraph, NodeType
from ..graph.cpu_node import CpuNode
from ..graph.network_node import NetworkNode
from .base import NodeTiming, NodeTimings, SimulationOptions, SimulationResult, Simulator
from .connection_pool import ConnectionPool

logger = logging.getLogger(__name__)

# 单个CPU任务的模拟耗时上限(ms)
DEFAULT_MAXIMUM_CPU_TASK_DURATION = 10000


class DefaultSimulator(Simulator):
    """默认模拟器实现"""

    def __init__(self, options: Optional[SimulationOptions] = None):
        super().__init__(options)

    def simulate(self, graph: DependencyGraph, label: Optional[str] = None) -> SimulationResult:
        graph.validate()

        order = graph.discovery_order()
        pool = ConnectionPool(self.options.max_concurrent_requests,
                              self.options.max_connections_per_origin)

        remaining = [len(graph.get_dependencies(i)) for i in range(len(graph))]
        timings: List[Optional[NodeTiming]] = [None] * len(graph)
        ready: List[int] = [graph.root_index]
        in_flight: Dict[int, float] = {}
        cpu_busy = False
        now = 0.0

        while ready or in_flight:
            # 按发现顺序启动所有能启动的节点
            still_waiting = []
            for index in ready:
                node = graph.node_at(index)
                if node.type == NodeType.CPU:
                    if cpu_busy:
                        still_waiting.append(index)
                        continue
                    cpu_busy = True
                    duration = self._estimate_cpu_duration(node)
                else:
                    origin = node.origin
                    if not pool.can_acquire(origin):
                        still_waiting.append(index)
                        continue
                    warm = pool.acquire(origin)
                    duration = self._estimate_network_duration(node, warm)

                timings[index] = NodeTiming(start_time=now, end_time=now + duration, duration=duration)
                in_flight[index] = now + duration
            ready = still_waiting

            if not in_flight:
                if ready:
                    raise SimulatorError(f"Unable to schedule {len(ready)} ready nodes")
                break

            now = min(in_flight.values())
            finished = sorted((i for i, end in in_flight.items() if end == now), key=order.__getitem__)
            for index in finished:
                del in_flight[index]
                node = graph.node_at(index)
                if node.type == NodeType.CPU:
                    cpu_busy = False
                else:
                    pool.release(node.origin)

                for dependent in graph.get_dependents(index):
                    remaining[dependent] -= 1
                    if remaining[dependent] == 0:
                        ready.append(dependent)
            ready.sort(key=order.__getitem__)

        if any(timing is None for timing in timings):
            raise SimulatorError("Simulation finished with unscheduled nodes")

        total = max((timing.end_time for timing in timings), default=0.0)
        logger.debug("simulation %s: %d nodes, %.1f ms", label or "<unnamed>", len(graph), total)
        return SimulationResult(time_in_ms=total, node_timings=NodeTimings(graph, timings))

    def _estimate_cpu_duration(self, node: CpuNode) -> float:
        """CPU任务耗时(ms)：观测耗时乘以降速倍数"""
        if node.did_perform_layout():
            multiplier = self.options.effective_layout_task_multiplier
        else:
            multiplier = self.options.cpu_slowdown_multiplier
        return min(node.duration / 1000 * multiplier, DEFAULT_MAXIMUM_CPU_TASK_DURATION)

    def _estimate_network_duration(self, node: NetworkNode, warm_connection: bool) -> float:
        """
        网络请求耗时(ms)

        新连接需要TCP握手（1个RTT），https再加TLS握手（1个RTT）；
        之后是一次请求往返、服务端响应时间和按吞吐量计算的传输时间。
        """
        origin = node.origin
        rtt = self.options.rtt + self.options.additional_rtt_by_origin.get(origin, 0.0)

        handshake = 0.0
        if not warm_connection:
            handshake = rtt * (2 if node.is_secure else 1)

        server_response_time = self.options.server_response_time_by_origin.get(origin, 0.0)
        transfer_time = node.request.transfer_size * 8 * 1000 / self.options.throughput
        return handshake + rtt + server_response_time + transfer_time


def create_simulator(options: Optional[SimulationOptions] = None) -> Simulator:
    """创建默认模拟器"""
    return DefaultSimulator(options)
