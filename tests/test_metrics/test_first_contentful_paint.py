"""
首次内容绘制测试
"""

import pytest

from pageload_estimate.errors import MissingNavigationTimestampError
from pageload_estimate.graph import DependencyGraph, NavigationTimestamps
from pageload_estimate.metrics import MetricComputationData, MetricType, metric_registry
from pageload_estimate.metrics.first_contentful_paint import (
    get_optimistic_graph,
    get_pessimistic_graph,
    get_render_blocking_node_data,
    get_script_urls,
)


def _urls(graph):
    return [node.request.url for node in graph.iter_nodes() if node.type.value == "network"]


@pytest.fixture
def squoosh_like_graph(node_factory):
    """
    文档 -> 解析 -> 布局绘制
         -> 脚本发起的 main.js（绘制之后才完成）
         -> 低优先级图片
    """
    network, cpu = node_factory["network"], node_factory["cpu"]
    graph = DependencyGraph()
    graph.add_node(network("doc", "https://squoosh.app/", "Document", "VeryHigh",
                           request_time=0, end_time=100, is_main_document=True))
    graph.add_node(cpu("parse", 110_000, 5_000, {"ParseHTML": None}))
    graph.add_node(cpu("paint", 120_000, 2_000, {"Layout": None, "Paint": None}))
    graph.add_node(network("main", "https://squoosh.app/main.js", "Script", "High",
                           request_time=115, end_time=300, initiator_type="script"))
    graph.add_node(network("logo", "https://squoosh.app/logo.png", "Image", "Low",
                           request_time=115, end_time=150))
    graph.add_dependency("parse", "doc")
    graph.add_dependency("paint", "parse")
    graph.add_dependency("main", "parse")
    graph.add_dependency("logo", "parse")
    return graph


class TestFirstContentfulPaintGraphs:
    """测试FCP剪枝"""

    def test_only_main_document_survives(self, squoosh_like_graph):
        navigation = NavigationTimestamps(first_contentful_paint=200_000)
        assert _urls(get_optimistic_graph(squoosh_like_graph, navigation)) == ["https://squoosh.app/"]
        assert _urls(get_pessimistic_graph(squoosh_like_graph, navigation)) == ["https://squoosh.app/"]

    def test_negative_main_document_end_time(self, squoosh_like_graph):
        squoosh_like_graph.root.request.network_end_time = -1
        navigation = NavigationTimestamps(first_contentful_paint=200_000)

        optimistic = get_optimistic_graph(squoosh_like_graph, navigation)
        pessimistic = get_pessimistic_graph(squoosh_like_graph, navigation)
        assert _urls(optimistic) == ["https://squoosh.app/"]
        assert _urls(pessimistic) == ["https://squoosh.app/"]
        assert {node.id for node in optimistic.nodes} == {"doc", "parse", "paint"}

    def test_page_graph_keeps_render_blocking_nodes(self, page_graph, navigation):
        optimistic = get_optimistic_graph(page_graph, navigation)
        pessimistic = get_pessimistic_graph(page_graph, navigation)

        expected = {"n1", "c1", "n2", "n3", "c2", "c3"}
        assert {node.id for node in optimistic.nodes} == expected
        assert {node.id for node in pessimistic.nodes} == expected

    def test_script_initiated_request_excluded_only_when_optimistic(self, node_factory):
        network, cpu = node_factory["network"], node_factory["cpu"]
        graph = DependencyGraph()
        graph.add_node(network("doc", "https://example.com/", "Document", "VeryHigh",
                               end_time=100, is_main_document=True))
        graph.add_node(network("font", "https://example.com/font.woff2", "Font", "VeryHigh",
                               request_time=110, end_time=200, initiator_type="script"))
        graph.add_node(cpu("paint", 300_000, 1_000, {"Paint": None}))
        graph.add_dependency("font", "doc")
        graph.add_dependency("paint", "font")
        navigation = NavigationTimestamps(first_contentful_paint=400_000)

        assert _urls(get_optimistic_graph(graph, navigation)) == ["https://example.com/"]
        assert "https://example.com/font.woff2" in _urls(get_pessimistic_graph(graph, navigation))

    def test_missing_timestamp(self, page_graph):
        with pytest.raises(MissingNavigationTimestampError):
            get_optimistic_graph(page_graph, NavigationTimestamps())


class TestRenderBlockingNodeData:
    """测试阻塞信息收集"""

    def test_blocking_cpu_nodes(self, page_graph):
        data = get_render_blocking_node_data(
            page_graph, 720_000, lambda node: node.has_render_blocking_priority())
        assert data.render_blocking_cpu_node_ids == {"c1", "c2", "c3"}
        assert data.definitely_not_render_blocking_script_urls == set()

    def test_script_executed_after_cutoff_is_not_blocking(self, page_graph):
        data = get_render_blocking_node_data(page_graph, 950_000, lambda node: True)
        assert data.definitely_not_render_blocking_script_urls == {"https://cdn.example.net/analytics.js"}
        assert "c4" not in data.render_blocking_cpu_node_ids

    def test_script_urls_in_traversal_order(self, page_graph):
        assert get_script_urls(page_graph) == [
            "https://example.com/app.js",
            "https://cdn.example.net/analytics.js",
        ]


class TestFirstContentfulPaintMetric:
    """测试FCP计算"""

    def test_page_graph_estimate(self, computation_data):
        result = metric_registry.compute(MetricType.FIRST_CONTENTFUL_PAINT, computation_data)

        assert result.optimistic_estimate.time_in_ms == 645.0
        assert result.pessimistic_estimate.time_in_ms == 645.0
        assert result.timing == 645.0
        assert len(result.optimistic_estimate.node_timings) == 6
        assert len(result.pessimistic_estimate.node_timings) == 6

    def test_optimistic_graph_not_larger(self, page_graph, simulator, navigation):
        data = MetricComputationData(page_graph, simulator, navigation)
        result = metric_registry.compute("fcp", data)
        assert len(result.optimistic_graph) <= len(result.pessimistic_graph)
        assert result.optimistic_estimate.time_in_ms <= result.pessimistic_estimate.time_in_ms

    def test_blend_of_equal_branches(self, page_graph, navigation, stub_simulator_factory):
        simulator = stub_simulator_factory(1107, 1107)
        data = MetricComputationData(page_graph, simulator, navigation)
        result = metric_registry.compute(MetricType.FIRST_CONTENTFUL_PAINT, data)

        assert round(result.optimistic_estimate.time_in_ms) == 1107
        assert round(result.pessimistic_estimate.time_in_ms) == 1107
        assert round(result.timing) == 1107
        # 页面没有脚本发起的阻塞请求，两个分支保留相同的节点
        assert len(result.optimistic_estimate.node_timings) == 6
        assert len(result.pessimistic_estimate.node_timings) == 6
        assert simulator.labels == ["optimisticFirstContentfulPaint", "pessimisticFirstContentfulPaint"]
