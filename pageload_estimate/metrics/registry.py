"""
指标注册表

通过 MetricType 标签选择指标策略，而不是通过子类。
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .base import Extras, MetricComputationData, MetricPolicy, MetricResult, compute_metric
from .first_contentful_paint import FIRST_CONTENTFUL_PAINT
from .interactive import INTERACTIVE
from .largest_contentful_paint import LARGEST_CONTENTFUL_PAINT


class MetricType(str, Enum):
    """支持的指标，按依赖顺序排列"""
    FIRST_CONTENTFUL_PAINT = "fcp"
    LARGEST_CONTENTFUL_PAINT = "lcp"
    INTERACTIVE = "tti"


class MetricRegistry:
    """指标注册表类"""

    def __init__(self):
        self._policies: Dict[MetricType, MetricPolicy] = {}
        self._register_built_in_metrics()

    def _register_built_in_metrics(self) -> None:
        """注册内置指标"""
        self.register(MetricType.FIRST_CONTENTFUL_PAINT, FIRST_CONTENTFUL_PAINT)
        self.register(MetricType.LARGEST_CONTENTFUL_PAINT, LARGEST_CONTENTFUL_PAINT)
        self.register(MetricType.INTERACTIVE, INTERACTIVE)

    def register(self, metric_type: MetricType, policy: MetricPolicy) -> None:
        """
        注册指标策略，可用于替换内置的剪枝策略

        Args:
            metric_type: 指标类型
            policy: 指标策略
        """
        self._policies[metric_type] = policy

    def get_policy(self, metric_type: Union[MetricType, str]) -> MetricPolicy:
        """获取指标策略"""
        try:
            metric_type = MetricType(metric_type)
        except ValueError:
            raise ValueError(f"Unsupported metric: {metric_type}") from None

        if metric_type not in self._policies:
            raise ValueError(f"Metric not registered: {metric_type.value}")
        return self._policies[metric_type]

    def compute(self, metric_type: Union[MetricType, str], data: MetricComputationData,
                extras: Optional[Extras] = None) -> MetricResult:
        """计算指定指标"""
        return compute_metric(self.get_policy(metric_type), data, extras)

    def list_metrics(self) -> List[str]:
        """获取所有已注册的指标"""
        return [metric_type.value for metric_type in self._policies]

    def get_metric_info(self, metric_type: Union[MetricType, str]) -> Dict[str, Any]:
        """获取指标信息"""
        policy = self.get_policy(metric_type)
        return {
            "name": policy.name,
            "intercept": policy.coefficients.intercept,
            "optimistic": policy.coefficients.optimistic,
            "pessimistic": policy.coefficients.pessimistic,
            "requires": list(policy.required_extras),
        }


# 全局指标注册表实例
metric_registry = MetricRegistry()
