"""
指标计算基础

每个指标由一个 MetricPolicy 值描述：系数、两种剪枝方式和估算后处理。
compute_metric 对所有指标执行同一套流程：
剪枝两次 -> 分别模拟 -> 分别后处理 -> 按系数线性混合。
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..errors import MissingDependencyError
from ..graph.base import DependencyGraph
from ..graph.navigation import NavigationTimestamps
from ..simulator.base import SimulationResult, Simulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricCoefficients:
    """乐观/悲观估算的混合系数"""
    intercept: float
    optimistic: float
    pessimistic: float


@dataclass
class MetricResult:
    """指标计算结果"""
    timing: float
    optimistic_estimate: SimulationResult
    pessimistic_estimate: SimulationResult
    optimistic_graph: DependencyGraph
    pessimistic_graph: DependencyGraph


@dataclass(frozen=True)
class Extras:
    """前置指标结果，依赖链为 FCP -> LCP -> TTI"""
    fcp_result: Optional[MetricResult] = None
    lcp_result: Optional[MetricResult] = None


@dataclass
class MetricComputationData:
    """指标计算输入"""
    graph: DependencyGraph
    simulator: Simulator
    navigation: NavigationTimestamps


GraphPruner = Callable[[DependencyGraph, NavigationTimestamps], DependencyGraph]
EstimateExtractor = Callable[[SimulationResult, Extras, bool], SimulationResult]


def keep_full_graph(graph: DependencyGraph, navigation: NavigationTimestamps) -> DependencyGraph:
    """不做剪枝，返回完整依赖图的副本"""
    return graph.clone_with_relationships()


def use_simulation_estimate(simulation_result: SimulationResult, extras: Extras,
                            is_optimistic: bool) -> SimulationResult:
    """直接使用模拟结果作为估算"""
    return simulation_result


@dataclass(frozen=True)
class MetricPolicy:
    """
    指标策略

    Attributes:
        name: 指标名称，用于模拟标签和日志
        coefficients: 混合系数
        prune_optimistic: 生成乐观依赖图
        prune_pessimistic: 生成悲观依赖图
        extract_estimate: 模拟结果后处理，第三个参数表示是否乐观分支
        required_extras: 必须提供的前置指标字段名
        minimum_timing_extra: 最终时间不得早于该前置指标的时间
    """
    name: str
    coefficients: MetricCoefficients
    prune_optimistic: GraphPruner
    prune_pessimistic: GraphPruner = keep_full_graph
    extract_estimate: EstimateExtractor = use_simulation_estimate
    required_extras: Tuple[str, ...] = ()
    minimum_timing_extra: Optional[str] = None


def check_required_extras(policy: MetricPolicy, extras: Extras) -> None:
    """缺少前置指标时直接失败"""
    for field_name in policy.required_extras:
        if getattr(extras, field_name, None) is None:
            raise MissingDependencyError(f"{field_name} is required to calculate the {policy.name} metric")


def compute_metric(policy: MetricPolicy, data: MetricComputationData,
                   extras: Optional[Extras] = None) -> MetricResult:
    """
    计算单个指标

    Args:
        policy: 指标策略
        data: 依赖图、模拟器与导航时间戳
        extras: 前置指标结果

    Returns:
        指标结果，包含混合后的时间、两个分支的估算和依赖图

    Raises:
        MissingDependencyError: 缺少必需的前置指标
    """
    extras = extras or Extras()
    check_required_extras(policy, extras)

    optimistic_graph = policy.prune_optimistic(data.graph, data.navigation)
    pessimistic_graph = policy.prune_pessimistic(data.graph, data.navigation)

    optimistic_simulation = data.simulator.simulate(optimistic_graph, label=f"optimistic{policy.name}")
    pessimistic_simulation = data.simulator.simulate(pessimistic_graph, label=f"pessimistic{policy.name}")

    optimistic_estimate = policy.extract_estimate(optimistic_simulation, extras, True)
    pessimistic_estimate = policy.extract_estimate(pessimistic_simulation, extras, False)

    coefficients = policy.coefficients
    timing = (coefficients.intercept +
              coefficients.optimistic * optimistic_estimate.time_in_ms +
              coefficients.pessimistic * pessimistic_estimate.time_in_ms)

    if policy.minimum_timing_extra:
        floor_result = getattr(extras, policy.minimum_timing_extra, None)
        if floor_result is not None:
            timing = max(timing, floor_result.timing)

    logger.debug("%s: optimistic=%.1fms pessimistic=%.1fms timing=%.1fms",
                 policy.name, optimistic_estimate.time_in_ms,
                 pessimistic_estimate.time_in_ms, timing)

    return MetricResult(
        timing=timing,
        optimistic_estimate=optimistic_estimate,
        pessimistic_estimate=pessimistic_estimate,
        optimistic_graph=optimistic_graph,
        pessimistic_graph=pessimistic_graph,
    )
