"""
pytest配置文件

定义测试的全局配置和fixture。
"""

import json
from typing import Dict, Optional

import pytest

from pageload_estimate.graph import (
    CpuNode,
    DependencyGraph,
    NavigationTimestamps,
    NetworkNode,
    NetworkRequest,
    TraceEvent,
)
from pageload_estimate.metrics import MetricComputationData, MetricResult
from pageload_estimate.simulator import (
    DefaultSimulator,
    NodeTiming,
    NodeTimings,
    SimulationOptions,
    SimulationResult,
    Simulator,
)


def network_node(node_id: str, url: str, resource_type: str = "Other", priority: str = "Low",
                 transfer_size: int = 0, request_time: float = 0.0, end_time: float = 0.0,
                 initiator_type: str = "parser", is_main_document: bool = False) -> NetworkNode:
    request = NetworkRequest(
        request_id=node_id,
        url=url,
        resource_type=resource_type,
        priority=priority,
        transfer_size=transfer_size,
        network_request_time=request_time,
        network_end_time=end_time,
        initiator_type=initiator_type,
    )
    return NetworkNode(request, is_main_document=is_main_document)


def cpu_node(node_id: str, ts: float, dur: float, children: Optional[Dict[str, Optional[str]]] = None) -> CpuNode:
    """children: 子事件名 -> 脚本URL（非EvaluateScript时为None）"""
    child_events = []
    for name, url in (children or {}).items():
        args = {"data": {"url": url}} if url else {}
        child_events.append(TraceEvent(name=name, ts=ts, dur=dur, args=args))
    return CpuNode(node_id, TraceEvent(name="RunTask", ts=ts, dur=dur), child_events)


def build_page_graph() -> DependencyGraph:
    """
    示例页面依赖图

    n1(文档) -> c1(解析) -> n2(app.js) -> c2(执行app.js, 60ms) -> c3(布局+绘制) -> ...
                        -> n3(style.css) ----------------------> c3
                        -> n4(低优先级图片)
    c2 -> n5(脚本发起的统计脚本) -> c4(执行统计脚本, 80ms)
    """
    graph = DependencyGraph()
    graph.add_node(network_node("n1", "https://example.com/", "Document", "VeryHigh",
                                transfer_size=10000, request_time=0, end_time=300,
                                is_main_document=True))
    graph.add_node(cpu_node("c1", 310_000, 20_000, {"ParseHTML": None}))
    graph.add_node(network_node("n2", "https://example.com/app.js", "Script", "High",
                                transfer_size=20000, request_time=320, end_time=600))
    graph.add_node(network_node("n3", "https://example.com/style.css", "Stylesheet", "VeryHigh",
                                transfer_size=5000, request_time=320, end_time=550))
    graph.add_node(network_node("n4", "https://example.com/hero.jpg", "Image", "Low",
                                transfer_size=30000, request_time=320, end_time=900))
    graph.add_node(cpu_node("c2", 610_000, 60_000, {"EvaluateScript": "https://example.com/app.js"}))
    graph.add_node(cpu_node("c3", 700_000, 10_000, {"Layout": None, "Paint": None}))
    graph.add_node(network_node("n5", "https://cdn.example.net/analytics.js", "Script", "Low",
                                transfer_size=10000, request_time=700, end_time=950,
                                initiator_type="script"))
    graph.add_node(cpu_node("c4", 1_000_000, 80_000,
                            {"EvaluateScript": "https://cdn.example.net/analytics.js"}))

    graph.add_dependency("c1", "n1")
    graph.add_dependency("n2", "c1")
    graph.add_dependency("n3", "c1")
    graph.add_dependency("n4", "c1")
    graph.add_dependency("c2", "n2")
    graph.add_dependency("c3", "c2")
    graph.add_dependency("c3", "n3")
    graph.add_dependency("n5", "c2")
    graph.add_dependency("c4", "n5")
    return graph


def build_diamond_graph() -> DependencyGraph:
    """a -> b, a -> c, b -> d, c -> d"""
    graph = DependencyGraph()
    graph.add_node(network_node("a", "https://example.com/", "Document", "VeryHigh", is_main_document=True))
    graph.add_node(cpu_node("b", 0, 1000))
    graph.add_node(cpu_node("c", 0, 1000))
    graph.add_node(cpu_node("d", 0, 1000))
    graph.add_dependency("b", "a")
    graph.add_dependency("c", "a")
    graph.add_dependency("d", "b")
    graph.add_dependency("d", "c")
    return graph


def page_graph_document() -> Dict:
    """示例页面依赖图的JSON文档形式"""
    def request(url, resource_type, priority, size, start, end, initiator="parser"):
        return {"url": url, "resource_type": resource_type, "priority": priority,
                "transfer_size": size, "network_request_time": start,
                "network_end_time": end, "initiator_type": initiator}

    def task(ts, dur, *children):
        return {"event": {"name": "RunTask", "ts": ts, "dur": dur},
                "child_events": [dict(child, ts=ts, dur=dur) for child in children]}

    return {
        "navigation": {"first_contentful_paint": 720000, "largest_contentful_paint": 950000},
        "nodes": [
            {"id": "n1", "type": "network", "is_main_document": True,
             "request": request("https://example.com/", "Document", "VeryHigh", 10000, 0, 300)},
            dict(task(310000, 20000, {"name": "ParseHTML"}), id="c1", type="cpu"),
            {"id": "n2", "type": "network",
             "request": request("https://example.com/app.js", "Script", "High", 20000, 320, 600)},
            {"id": "n3", "type": "network",
             "request": request("https://example.com/style.css", "Stylesheet", "VeryHigh", 5000, 320, 550)},
            {"id": "n4", "type": "network",
             "request": request("https://example.com/hero.jpg", "Image", "Low", 30000, 320, 900)},
            dict(task(610000, 60000, {"name": "EvaluateScript", "url": "https://example.com/app.js"}),
                 id="c2", type="cpu"),
            dict(task(700000, 10000, {"name": "Layout"}, {"name": "Paint"}), id="c3", type="cpu"),
            {"id": "n5", "type": "network",
             "request": request("https://cdn.example.net/analytics.js", "Script", "Low",
                                10000, 700, 950, initiator="script")},
            dict(task(1000000, 80000, {"name": "EvaluateScript",
                                       "url": "https://cdn.example.net/analytics.js"}),
                 id="c4", type="cpu"),
        ],
        "edges": [
            {"from": "n1", "to": "c1"},
            {"from": "c1", "to": "n2"},
            {"from": "c1", "to": "n3"},
            {"from": "c1", "to": "n4"},
            {"from": "n2", "to": "c2"},
            {"from": "c2", "to": "c3"},
            {"from": "n3", "to": "c3"},
            {"from": "c2", "to": "n5"},
            {"from": "n5", "to": "c4"},
        ],
    }


class StubSimulator(Simulator):
    """
    按分支返回固定总时间的模拟器

    默认所有节点时间为0；timed_nodes 为 True 时所有节点都在分支总时间结束。
    """

    def __init__(self, optimistic_ms: float, pessimistic_ms: float, timed_nodes: bool = False):
        super().__init__()
        self.optimistic_ms = optimistic_ms
        self.pessimistic_ms = pessimistic_ms
        self.timed_nodes = timed_nodes
        self.labels = []

    def simulate(self, graph, label=None):
        self.labels.append(label)
        time_in_ms = self.optimistic_ms if label.startswith("optimistic") else self.pessimistic_ms
        end_time = time_in_ms if self.timed_nodes else 0.0
        timings = [NodeTiming(start_time=0.0, end_time=end_time, duration=end_time) for _ in range(len(graph))]
        return SimulationResult(time_in_ms=time_in_ms, node_timings=NodeTimings(graph, timings))


def make_metric_result(graph: DependencyGraph, timing: float,
                       optimistic_ms: float, pessimistic_ms: float) -> MetricResult:
    """构造前置指标结果"""
    timings = NodeTimings(graph, [NodeTiming(0.0, 0.0, 0.0) for _ in range(len(graph))])
    return MetricResult(
        timing=timing,
        optimistic_estimate=SimulationResult(time_in_ms=optimistic_ms, node_timings=timings),
        pessimistic_estimate=SimulationResult(time_in_ms=pessimistic_ms, node_timings=timings),
        optimistic_graph=graph,
        pessimistic_graph=graph,
    )


@pytest.fixture
def page_graph():
    """示例页面依赖图"""
    return build_page_graph()


@pytest.fixture
def diamond_graph():
    """菱形依赖图"""
    return build_diamond_graph()


@pytest.fixture
def page_graph_file(tmp_path):
    """写入临时目录的示例页面依赖图文档"""
    path = tmp_path / "page_graph.json"
    path.write_text(json.dumps(page_graph_document()), encoding="utf-8")
    return path


@pytest.fixture
def node_factory():
    """节点构造函数"""
    return {"network": network_node, "cpu": cpu_node}


@pytest.fixture
def navigation():
    """示例页面的绘制时间点"""
    return NavigationTimestamps(first_contentful_paint=720_000, largest_contentful_paint=950_000)


@pytest.fixture
def test_options():
    """便于手算的模拟配置：RTT 100ms，1000字节传输1ms，CPU不降速"""
    return SimulationOptions(
        rtt=100,
        throughput=8_000_000,
        cpu_slowdown_multiplier=1.0,
        layout_task_multiplier=1.0,
        max_concurrent_requests=10,
        max_connections_per_origin=6,
    )


@pytest.fixture
def simulator(test_options):
    return DefaultSimulator(test_options)


@pytest.fixture
def computation_data(page_graph, simulator, navigation):
    return MetricComputationData(graph=page_graph, simulator=simulator, navigation=navigation)


@pytest.fixture
def stub_simulator_factory():
    return StubSimulator


@pytest.fixture
def metric_result_factory():
    return make_metric_result
