"""
模拟器接口定义

指标层只依赖这里定义的契约：给定依赖图返回每个节点的模拟时间和总完成时间。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel as PydanticModel, Field

from ..graph.base import BaseNode, DependencyGraph


class SimulationOptions(PydanticModel):
    """模拟节流配置"""
    rtt: float = Field(default=150.0, ge=0, description="往返时延(ms)")
    throughput: float = Field(default=1.6 * 1024 * 1024, gt=0, description="下行吞吐量(bit/s)")
    cpu_slowdown_multiplier: float = Field(default=4.0, gt=0, description="CPU降速倍数")
    layout_task_multiplier: Optional[float] = Field(default=None, gt=0, description="布局任务倍数，默认取CPU降速倍数的一半")
    max_concurrent_requests: int = Field(default=10, ge=1, description="全局最大并发连接数")
    max_connections_per_origin: int = Field(default=6, ge=1, description="每个源的最大连接数")
    additional_rtt_by_origin: Dict[str, float] = Field(default_factory=dict, description="各源额外往返时延(ms)")
    server_response_time_by_origin: Dict[str, float] = Field(default_factory=dict, description="各源服务端响应时间(ms)")

    @property
    def effective_layout_task_multiplier(self) -> float:
        if self.layout_task_multiplier is not None:
            return self.layout_task_multiplier
        return self.cpu_slowdown_multiplier * 0.5


@dataclass(frozen=True)
class NodeTiming:
    """单个节点的模拟时间（毫秒）"""
    start_time: float
    end_time: float
    duration: float


class NodeTimings:
    """
    一次模拟产生的节点时间表

    以图索引为下标的稠密数组，和被模拟的图绑定。
    """

    def __init__(self, graph: DependencyGraph, timings: List[Optional[NodeTiming]]):
        if len(timings) != len(graph):
            raise ValueError(f"Expected {len(graph)} timings, got {len(timings)}")
        self._graph = graph
        self._timings = tuple(timings)

    def __len__(self) -> int:
        return sum(1 for timing in self._timings if timing is not None)

    def __getitem__(self, index: int) -> NodeTiming:
        timing = self._timings[index]
        if timing is None:
            raise KeyError(index)
        return timing

    def get(self, index: int) -> Optional[NodeTiming]:
        return self._timings[index]

    def for_node(self, node_id: str) -> NodeTiming:
        """按节点ID获取时间"""
        return self[self._graph.index_of(node_id)]

    def items(self) -> Iterator[Tuple[BaseNode, NodeTiming]]:
        """按索引顺序产生 (节点, 时间)"""
        for index, timing in enumerate(self._timings):
            if timing is not None:
                yield self._graph.node_at(index), timing

    @property
    def graph(self) -> DependencyGraph:
        return self._graph


@dataclass(frozen=True)
class SimulationResult:
    """模拟结果"""
    time_in_ms: float
    node_timings: NodeTimings


class Simulator(ABC):
    """模拟器基础类"""

    def __init__(self, options: Optional[SimulationOptions] = None):
        self.options = options or SimulationOptions()

    @property
    def rtt(self) -> float:
        return self.options.rtt

    @abstractmethod
    def simulate(self, graph: DependencyGraph, label: Optional[str] = None) -> SimulationResult:
        """
        模拟依赖图的执行

        保证：同源请求超过连接上限时排队；CPU任务严格串行，同时就绪时按发现顺序执行；
        节点在所有依赖完成之前不会开始。

        Args:
            graph: 待模拟的依赖图
            label: 本次模拟的标签，仅用于日志

        Returns:
            模拟结果
        """
        pass
