"""
PageLoad-Estimate: 页面加载性能估算工具

基于页面的依赖图（主线程任务与网络请求），在给定节流条件下模拟执行，
估算首次内容绘制（FCP）、最大内容绘制（LCP）和可交互时间（TTI）。
"""

__version__ = "0.1.0"

from .errors import (
    EstimateError,
    MalformedGraphError,
    MissingDependencyError,
    MissingNavigationTimestampError,
    SimulatorError,
)
from .graph import CpuNode, DependencyGraph, NavigationTimestamps, NetworkNode, NetworkRequest
from .simulator import DefaultSimulator, SimulationOptions, SimulationResult
from .metrics import Extras, MetricComputationData, MetricResult, MetricType, metric_registry
from .estimator import PageLoadEstimator

__all__ = [
    "EstimateError",
    "MalformedGraphError",
    "MissingDependencyError",
    "MissingNavigationTimestampError",
    "SimulatorError",
    "CpuNode",
    "DependencyGraph",
    "NavigationTimestamps",
    "NetworkNode",
    "NetworkRequest",
    "DefaultSimulator",
    "SimulationOptions",
    "SimulationResult",
    "Extras",
    "MetricComputationData",
    "MetricResult",
    "MetricType",
    "metric_registry",
    "PageLoadEstimator",
]
