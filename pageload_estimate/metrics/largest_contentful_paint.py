"""
最大内容绘制（LCP）

以LCP时间点为截止剪枝。乐观分支排除低优先级图片，悲观分支保留全部请求和所有布局任务。
结果不早于FCP。
"""

from ..errors import MissingNavigationTimestampError
from ..graph.base import BaseNode, DependencyGraph, NodeType
from ..graph.navigation import NavigationTimestamps
from ..simulator.base import SimulationResult
from .base import Extras, MetricCoefficients, MetricPolicy
from .first_contentful_paint import get_first_paint_based_graph


def is_not_low_priority_image_node(node: BaseNode) -> bool:
    """非图片，或非低优先级的图片"""
    if node.type != NodeType.NETWORK:
        return True
    is_image = node.request.resource_type == "Image"
    is_low_priority = node.request.priority in ("Low", "VeryLow")
    return not is_image or not is_low_priority


def _lcp_cutoff(navigation: NavigationTimestamps) -> float:
    if navigation.largest_contentful_paint is None:
        raise MissingNavigationTimestampError("largest_contentful_paint timestamp is required")
    return navigation.largest_contentful_paint


def get_optimistic_graph(graph: DependencyGraph, navigation: NavigationTimestamps) -> DependencyGraph:
    return get_first_paint_based_graph(graph, _lcp_cutoff(navigation), is_not_low_priority_image_node)


def get_pessimistic_graph(graph: DependencyGraph, navigation: NavigationTimestamps) -> DependencyGraph:
    return get_first_paint_based_graph(
        graph, _lcp_cutoff(navigation),
        lambda node: True,
        additional_cpu_nodes_to_treat_as_render_blocking=lambda node: node.did_perform_layout(),
    )


def get_estimate_from_simulation(simulation_result: SimulationResult, extras: Extras,
                                 is_optimistic: bool) -> SimulationResult:
    """取非低优先级图片节点中最晚的结束时间"""
    end_times = [
        timing.end_time
        for node, timing in simulation_result.node_timings.items()
        if is_not_low_priority_image_node(node)
    ]
    return SimulationResult(
        time_in_ms=max(end_times, default=0.0),
        node_timings=simulation_result.node_timings,
    )


LARGEST_CONTENTFUL_PAINT = MetricPolicy(
    name="LargestContentfulPaint",
    coefficients=MetricCoefficients(intercept=0, optimistic=0.5, pessimistic=0.5),
    prune_optimistic=get_optimistic_graph,
    prune_pessimistic=get_pessimistic_graph,
    extract_estimate=get_estimate_from_simulation,
    required_extras=("fcp_result",),
    minimum_timing_extra="fcp_result",
)
