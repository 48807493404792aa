"""
可交互时间（TTI）
"""

from ..graph.base import BaseNode, DependencyGraph, NodeType
from ..graph.navigation import NavigationTimestamps
from ..simulator.base import NodeTimings, SimulationResult
from .base import Extras, MetricCoefficients, MetricPolicy, keep_full_graph

# 移动端上20ms以上的CPU任务都会成为关键长任务
CRITICAL_LONG_TASK_THRESHOLD = 20

# 估算时视为长任务的模拟耗时(ms)
LONG_TASK_DURATION = 50


def get_optimistic_graph(graph: DependencyGraph, navigation: NavigationTimestamps) -> DependencyGraph:
    """保留可能成为长任务的CPU任务，以及脚本和高优先级请求（图片除外）"""
    # 节点耗时单位为微秒
    minimum_cpu_task_duration = CRITICAL_LONG_TASK_THRESHOLD * 1000

    def is_relevant(node: BaseNode) -> bool:
        if node.type == NodeType.CPU:
            return node.duration > minimum_cpu_task_duration

        is_image = node.request.resource_type == "Image"
        is_script = node.request.resource_type == "Script"
        is_high_priority = node.request.priority in ("High", "VeryHigh")
        return not is_image and (is_script or is_high_priority)

    return graph.clone_with_relationships(is_relevant)


def get_last_long_task_end_time(node_timings: NodeTimings, duration: float = LONG_TASK_DURATION) -> float:
    """
    最后一个长任务的结束时间

    Args:
        node_timings: 模拟得到的节点时间
        duration: 长任务阈值(ms)，耗时严格大于该值才算

    Returns:
        结束时间(ms)，没有长任务时为0
    """
    end_times = [
        timing.end_time
        for node, timing in node_timings.items()
        if node.type == NodeType.CPU and timing.duration > duration
    ]
    return max(end_times, default=0.0)


def get_estimate_from_simulation(simulation_result: SimulationResult, extras: Extras,
                                 is_optimistic: bool) -> SimulationResult:
    """取同一分支的LCP估算与最后一个长任务结束时间中的较大者"""
    lcp_result = extras.lcp_result
    if is_optimistic:
        minimum_time = lcp_result.optimistic_estimate.time_in_ms
    else:
        minimum_time = lcp_result.pessimistic_estimate.time_in_ms

    last_task_at = get_last_long_task_end_time(simulation_result.node_timings)
    return SimulationResult(
        time_in_ms=max(minimum_time, last_task_at),
        node_timings=simulation_result.node_timings,
    )


INTERACTIVE = MetricPolicy(
    name="Interactive",
    coefficients=MetricCoefficients(intercept=0, optimistic=0.45, pessimistic=0.55),
    prune_optimistic=get_optimistic_graph,
    prune_pessimistic=keep_full_graph,
    extract_estimate=get_estimate_from_simulation,
    required_extras=("lcp_result",),
    minimum_timing_extra="lcp_result",
)
