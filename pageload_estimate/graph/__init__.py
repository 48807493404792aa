"""
依赖图模块

定义CPU任务、网络请求两类节点，以及基于索引表的单根依赖图。
"""

from .base import BaseNode, DependencyGraph, NodeType
from .cpu_node import CpuNode, TraceEvent
from .network_node import NetworkNode, NetworkRequest
from .navigation import NavigationTimestamps
from .loader import GraphDocument, load_graph, parse_graph_document

__all__ = [
    "BaseNode",
    "DependencyGraph",
    "NodeType",
    "CpuNode",
    "TraceEvent",
    "NetworkNode",
    "NetworkRequest",
    "NavigationTimestamps",
    "GraphDocument",
    "load_graph",
    "parse_graph_document",
]
