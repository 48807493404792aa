#!/usr/bin/env python3
"""
PageLoad-Estimate 基本使用示例

演示如何加载依赖图文档并估算 FCP / LCP / TTI。
"""

import os

from pageload_estimate import PageLoadEstimator, SimulationOptions, metric_registry
from pageload_estimate.graph import load_graph


def main():
    """主函数"""
    print("=== PageLoad-Estimate 基本使用示例 ===\n")

    # 1. 查看支持的指标
    print("支持的指标:")
    for metric in metric_registry.list_metrics():
        print(f"  - {metric}: {metric_registry.get_metric_info(metric)['name']}")
    print()

    # 2. 加载依赖图
    graph_file = os.path.join(os.path.dirname(__file__), "page_graph.json")
    graph, navigation = load_graph(graph_file)
    print(f"依赖图: {len(graph)} 个节点，根节点 {graph.root.id}\n")

    # 3. 分别在慢速4G和有线网络下估算
    estimator = PageLoadEstimator()
    throttling = {
        "慢速4G": SimulationOptions(),
        "有线网络": SimulationOptions(rtt=40, throughput=10 * 1024 * 1024, cpu_slowdown_multiplier=1),
    }
    for label, options in throttling.items():
        summary = estimator.estimate_graph(graph, navigation, options)
        print(f"{label}:")
        for metric in summary["metrics"]:
            print(f"  {metric['metric'].upper()}: {metric['timing_ms']:.0f} ms "
                  f"(乐观 {metric['optimistic_ms']:.0f} / 悲观 {metric['pessimistic_ms']:.0f})")
        print()

    print("=== 示例完成 ===")


if __name__ == "__main__":
    main()
