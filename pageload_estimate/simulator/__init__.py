"""
模拟器模块

定义模拟器契约（输入依赖图，输出节点时间与总时间）以及参考实现。
"""

from .base import NodeTiming, NodeTimings, SimulationOptions, SimulationResult, Simulator
from .connection_pool import ConnectionPool
from .simulator import DefaultSimulator, create_simulator

__all__ = [
    "NodeTiming",
    "NodeTimings",
    "SimulationOptions",
    "SimulationResult",
    "Simulator",
    "ConnectionPool",
    "DefaultSimulator",
    "create_simulator",
]
