"""
指标模块

FCP、LCP、TTI 三个指标共用同一套计算流程，各自提供剪枝方式、后处理和混合系数。
"""

from .base import (
    Extras,
    MetricCoefficients,
    MetricComputationData,
    MetricPolicy,
    MetricResult,
    compute_metric,
)
from .first_contentful_paint import FIRST_CONTENTFUL_PAINT
from .largest_contentful_paint import LARGEST_CONTENTFUL_PAINT
from .interactive import INTERACTIVE, get_last_long_task_end_time
from .registry import MetricRegistry, MetricType, metric_registry

__all__ = [
    "Extras",
    "MetricCoefficients",
    "MetricComputationData",
    "MetricPolicy",
    "MetricResult",
    "compute_metric",
    "FIRST_CONTENTFUL_PAINT",
    "LARGEST_CONTENTFUL_PAINT",
    "INTERACTIVE",
    "get_last_long_task_end_time",
    "MetricRegistry",
    "MetricType",
    "metric_registry",
]
