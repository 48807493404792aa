"""
页面加载估算器

按 FCP -> LCP -> TTI 的依赖顺序计算全部指标，前一个指标的结果显式传给后一个。
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config.settings import Settings, get_settings
from ..graph.base import DependencyGraph
from ..graph.loader import load_graph
from ..graph.navigation import NavigationTimestamps
from ..metrics.base import Extras, MetricComputationData, MetricResult
from ..metrics.registry import MetricRegistry, MetricType, metric_registry
from ..simulator.base import SimulationOptions, Simulator
from ..simulator.simulator import create_simulator

logger = logging.getLogger(__name__)


class PageLoadEstimator:
    """页面加载性能估算器主类"""

    def __init__(self, settings: Optional[Settings] = None,
                 registry: Optional[MetricRegistry] = None):
        self.settings = settings or get_settings()
        self.metric_registry = registry or metric_registry

    def create_simulator(self, options: Optional[SimulationOptions] = None) -> Simulator:
        """根据设置（或显式配置）创建模拟器"""
        return create_simulator(options or self.settings.simulation_options())

    def estimate(self, data: MetricComputationData) -> Dict[MetricType, MetricResult]:
        """
        计算全部指标

        Args:
            data: 依赖图、模拟器与导航时间戳

        Returns:
            指标类型 -> 指标结果
        """
        fcp_result = self.metric_registry.compute(MetricType.FIRST_CONTENTFUL_PAINT, data)
        lcp_result = self.metric_registry.compute(
            MetricType.LARGEST_CONTENTFUL_PAINT, data, Extras(fcp_result=fcp_result)
        )
        tti_result = self.metric_registry.compute(
            MetricType.INTERACTIVE, data, Extras(lcp_result=lcp_result)
        )

        return {
            MetricType.FIRST_CONTENTFUL_PAINT: fcp_result,
            MetricType.LARGEST_CONTENTFUL_PAINT: lcp_result,
            MetricType.INTERACTIVE: tti_result,
        }

    def estimate_graph(self, graph: DependencyGraph, navigation: NavigationTimestamps,
                       options: Optional[SimulationOptions] = None) -> Dict[str, Any]:
        """
        估算依赖图并生成汇总结果

        Args:
            graph: 依赖图
            navigation: 导航时间戳
            options: 模拟配置，默认取全局设置

        Returns:
            汇总结果字典
        """
        simulator = self.create_simulator(options)
        data = MetricComputationData(graph=graph, simulator=simulator, navigation=navigation)
        results = self.estimate(data)

        metrics = []
        for metric_type, result in results.items():
            metrics.append({
                "metric": metric_type.value,
                "name": self.metric_registry.get_policy(metric_type).name,
                "timing_ms": result.timing,
                "optimistic_ms": result.optimistic_estimate.time_in_ms,
                "pessimistic_ms": result.pessimistic_estimate.time_in_ms,
                "optimistic_nodes": len(result.optimistic_estimate.node_timings),
                "pessimistic_nodes": len(result.pessimistic_estimate.node_timings),
            })
            logger.info("%s estimated at %.0f ms", metric_type.value, result.timing)

        return {
            "graph_info": get_graph_info(graph),
            "simulation_options": simulator.options.model_dump(),
            "metrics": metrics,
        }

    def estimate_file(self, path: Union[str, Path],
                      options: Optional[SimulationOptions] = None) -> Dict[str, Any]:
        """从依赖图文档估算"""
        graph, navigation = load_graph(path)
        summary = self.estimate_graph(graph, navigation, options)
        summary["source"] = str(path)
        return summary


def get_graph_info(graph: DependencyGraph) -> Dict[str, Any]:
    """依赖图基本信息"""
    counts = graph.count_by_type()
    root = graph.root
    return {
        "node_count": len(graph),
        "cpu_nodes": counts["cpu"],
        "network_nodes": counts["network"],
        "root_id": root.id,
        "root_url": getattr(getattr(root, "request", None), "url", None),
    }
