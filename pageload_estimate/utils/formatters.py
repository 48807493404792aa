"""
数据格式化工具

提供各种数据格式化功能。
"""

import json
from typing import Any, Dict
from tabulate import tabulate


def format_results(result: Dict[str, Any], format_type: str = "table",
                   verbose: bool = False) -> str:
    """
    格式化估算结果

    Args:
        result: 估算结果字典
        format_type: 输出格式 ("table", "json", "csv")
        verbose: 是否显示详细信息

    Returns:
        格式化后的字符串
    """
    if format_type == "json":
        return json.dumps(result, indent=2, ensure_ascii=False)

    elif format_type == "csv":
        return format_results_csv(result)

    else:  # table format
        return format_results_table(result, verbose)


def format_results_table(result: Dict[str, Any], verbose: bool = False) -> str:
    """格式化为表格形式"""
    lines = []

    lines.append("=== 页面加载性能估算结果 ===\n")

    graph_info = result.get("graph_info", {})
    if result.get("source"):
        lines.append(f"依赖图: {result['source']}")
    if graph_info.get("root_url"):
        lines.append(f"主文档: {graph_info['root_url']}")
    lines.append(f"节点数: {graph_info.get('node_count', 0)} "
                 f"(CPU {graph_info.get('cpu_nodes', 0)}, 网络 {graph_info.get('network_nodes', 0)})")

    if verbose:
        options = result.get("simulation_options", {})
        lines.append("")
        lines.append("模拟配置:")
        lines.append(f"  RTT: {options.get('rtt', 0):.0f} ms")
        lines.append(f"  吞吐量: {options.get('throughput', 0) / 1024:.0f} Kbps")
        lines.append(f"  CPU降速: {options.get('cpu_slowdown_multiplier', 0)}x")
        lines.append(f"  最大并发连接: {options.get('max_concurrent_requests', 0)}")
        lines.append(f"  同源最大连接: {options.get('max_connections_per_origin', 0)}")

    lines.append("")

    metrics_data = []
    for metric in result.get("metrics", []):
        row = [
            metric["metric"].upper(),
            format_duration(metric["timing_ms"]),
            format_duration(metric["optimistic_ms"]),
            format_duration(metric["pessimistic_ms"]),
        ]
        if verbose:
            row.append(f"{metric['optimistic_nodes']} / {metric['pessimistic_nodes']}")
        metrics_data.append(row)

    headers = ["指标", "估算值", "乐观估算", "悲观估算"]
    if verbose:
        headers.append("节点数(乐观/悲观)")

    lines.append("性能指标:")
    lines.append(tabulate(metrics_data, headers=headers, tablefmt="grid"))

    return "\n".join(lines)


def format_results_csv(result: Dict[str, Any]) -> str:
    """格式化为CSV形式"""
    headers = [
        "metric", "timing_ms", "optimistic_ms", "pessimistic_ms",
        "optimistic_nodes", "pessimistic_nodes",
    ]
    csv_lines = [",".join(headers)]

    for metric in result.get("metrics", []):
        csv_lines.append(",".join(str(metric.get(key, "")) for key in headers))

    return "\n".join(csv_lines)


def format_duration(ms: float) -> str:
    """
    格式化时长

    Args:
        ms: 毫秒

    Returns:
        1秒以下显示毫秒，否则显示秒
    """
    if ms < 1000:
        return f"{ms:.0f} ms"
    return f"{ms / 1000:.2f} s"
