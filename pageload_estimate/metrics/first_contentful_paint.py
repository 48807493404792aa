"""
首次内容绘制（FCP）

两个分支都只保留首次绘制之前完成、且会阻塞渲染的节点；
乐观分支额外排除由脚本发起的请求。
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from ..errors import MissingNavigationTimestampError
from ..graph.base import BaseNode, DependencyGraph, NodeType
from ..graph.cpu_node import CpuNode
from ..graph.navigation import NavigationTimestamps
from ..graph.network_node import NetworkNode
from .base import MetricCoefficients, MetricPolicy

NetworkNodePredicate = Callable[[NetworkNode], bool]
CpuNodePredicate = Callable[[CpuNode], bool]


@dataclass
class RenderBlockingNodeData:
    """绘制前的阻塞信息"""
    definitely_not_render_blocking_script_urls: Set[str] = field(default_factory=set)
    render_blocking_cpu_node_ids: Set[str] = field(default_factory=set)


def get_script_urls(graph: DependencyGraph,
                    condition: Optional[NetworkNodePredicate] = None) -> List[str]:
    """图中脚本请求的URL（按遍历顺序去重）"""
    urls: List[str] = []
    for node in graph.iter_nodes():
        if node.type != NodeType.NETWORK or node.request.resource_type != "Script":
            continue
        if condition is not None and not condition(node):
            continue
        if node.request.url not in urls:
            urls.append(node.request.url)
    return urls


def get_render_blocking_node_data(graph: DependencyGraph, cutoff_timestamp: float,
                                  treat_node_as_render_blocking: NetworkNodePredicate,
                                  additional_cpu_nodes_to_treat_as_render_blocking:
                                  Optional[CpuNodePredicate] = None) -> RenderBlockingNodeData:
    """
    找出截止时间之前阻塞渲染的CPU任务，以及确定不阻塞渲染的脚本

    Args:
        graph: 完整依赖图
        cutoff_timestamp: 绘制时间点（微秒）
        treat_node_as_render_blocking: 判断网络请求是否阻塞渲染
        additional_cpu_nodes_to_treat_as_render_blocking: 额外视为阻塞的CPU任务

    Returns:
        阻塞信息
    """
    script_url_to_node: Dict[str, CpuNode] = {}
    cpu_nodes: List[CpuNode] = []
    for node in graph.iter_nodes():
        if node.type != NodeType.CPU:
            continue
        # 用开始时间判断：绘制事件可能就在阻塞任务内部
        if node.start_time <= cutoff_timestamp:
            cpu_nodes.append(node)
        for url in node.get_evaluate_script_urls():
            existing = script_url_to_node.get(url, node)
            script_url_to_node[url] = node if node.start_time < existing.start_time else existing

    cpu_nodes.sort(key=lambda node: node.start_time)
    cpu_node_ids = {node.id for node in cpu_nodes}

    possibly_render_blocking_script_urls = get_script_urls(
        graph,
        lambda node: node.end_time <= cutoff_timestamp and treat_node_as_render_blocking(node),
    )

    data = RenderBlockingNodeData()
    for url in possibly_render_blocking_script_urls:
        cpu_node = script_url_to_node.get(url)
        if cpu_node is None:
            continue
        if cpu_node.id in cpu_node_ids:
            data.render_blocking_cpu_node_ids.add(cpu_node.id)
        else:
            # 脚本在绘制之后才执行
            data.definitely_not_render_blocking_script_urls.add(url)

    first_layout = next((node for node in cpu_nodes if node.did_perform_layout()), None)
    first_paint = next((node for node in cpu_nodes if node.has_child_event("Paint")), None)
    first_parse = next((node for node in cpu_nodes if node.has_child_event("ParseHTML")), None)
    for node in (first_layout, first_paint, first_parse):
        if node is not None:
            data.render_blocking_cpu_node_ids.add(node.id)

    if additional_cpu_nodes_to_treat_as_render_blocking is not None:
        for node in cpu_nodes:
            if additional_cpu_nodes_to_treat_as_render_blocking(node):
                data.render_blocking_cpu_node_ids.add(node.id)

    return data


def get_first_paint_based_graph(graph: DependencyGraph, cutoff_timestamp: float,
                                treat_node_as_render_blocking: NetworkNodePredicate,
                                additional_cpu_nodes_to_treat_as_render_blocking:
                                Optional[CpuNodePredicate] = None) -> DependencyGraph:
    """按绘制时间点剪枝，得到绘制所需的子图"""
    data = get_render_blocking_node_data(
        graph, cutoff_timestamp, treat_node_as_render_blocking,
        additional_cpu_nodes_to_treat_as_render_blocking,
    )

    def is_needed_for_paint(node: BaseNode) -> bool:
        if node.type == NodeType.CPU:
            return node.id in data.render_blocking_cpu_node_ids

        # 请求未完成时结束时间可能为负，因此同时检查开始时间
        ended_after_paint = node.end_time > cutoff_timestamp or node.start_time > cutoff_timestamp
        if ended_after_paint and not node.is_main_document():
            return False
        if node.request.url in data.definitely_not_render_blocking_script_urls:
            return False
        return treat_node_as_render_blocking(node)

    return graph.clone_with_relationships(is_needed_for_paint)


def _fcp_cutoff(navigation: NavigationTimestamps) -> float:
    if navigation.first_contentful_paint is None:
        raise MissingNavigationTimestampError("first_contentful_paint timestamp is required")
    return navigation.first_contentful_paint


def get_optimistic_graph(graph: DependencyGraph, navigation: NavigationTimestamps) -> DependencyGraph:
    # 由脚本发起的高优先级请求并不真正阻塞渲染
    return get_first_paint_based_graph(
        graph, _fcp_cutoff(navigation),
        lambda node: node.has_render_blocking_priority() and node.initiator_type != "script",
    )


def get_pessimistic_graph(graph: DependencyGraph, navigation: NavigationTimestamps) -> DependencyGraph:
    return get_first_paint_based_graph(
        graph, _fcp_cutoff(navigation),
        lambda node: node.has_render_blocking_priority(),
    )


FIRST_CONTENTFUL_PAINT = MetricPolicy(
    name="FirstContentfulPaint",
    coefficients=MetricCoefficients(intercept=0, optimistic=0.5, pessimistic=0.5),
    prune_optimistic=get_optimistic_graph,
    prune_pessimistic=get_pessimistic_graph,
)
