"""
估算引擎模块

串联各指标的计算，生成页面加载性能估算结果。
"""

from .base import PageLoadEstimator, get_graph_info

__all__ = [
    "PageLoadEstimator",
    "get_graph_info",
]
