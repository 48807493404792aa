"""
CLI命令实现

提供命令行界面的具体命令实现。
"""

import json
from typing import Optional

import click
from tabulate import tabulate

from .. import __version__
from ..config.settings import configure_logging, get_settings
from ..errors import EstimateError
from ..estimator.base import PageLoadEstimator, get_graph_info
from ..graph.base import NodeType
from ..graph.loader import load_graph
from ..metrics.registry import metric_registry
from ..utils.formatters import format_results


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__, prog_name="pageload-estimate")
@click.option("--log-level", default=None, type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help="日志级别")
def cli(log_level: Optional[str]):
    """页面加载性能估算工具

    基于页面依赖图模拟网络请求与主线程任务，估算 FCP、LCP 和 TTI。
    """
    try:
        settings = get_settings()
        if log_level:
            settings = settings.model_copy(update={"log_level": log_level})
        configure_logging(settings)
    except (OSError, ValueError) as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()


@cli.command()
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--rtt", type=float, help="往返时延(ms)")
@click.option("--throughput", type=float, help="下行吞吐量(Kbps)")
@click.option("--cpu-slowdown", type=float, help="CPU降速倍数")
@click.option("--max-concurrent-requests", type=int, help="全局最大并发连接数")
@click.option("--max-connections-per-origin", type=int, help="每个源的最大连接数")
@click.option("--output-file", type=click.Path(), help="输出文件路径")
@click.option("--format", "-f", default=None, type=click.Choice(["table", "json", "csv"]), help="输出格式")
@click.option("--verbose", "-v", is_flag=True, help="显示模拟配置和节点数")
def estimate(graph_file: str, rtt: Optional[float], throughput: Optional[float],
             cpu_slowdown: Optional[float], max_concurrent_requests: Optional[int],
             max_connections_per_origin: Optional[int], output_file: Optional[str],
             format: Optional[str], verbose: bool):
    """估算依赖图的 FCP / LCP / TTI"""

    try:
        settings = get_settings()
        options = settings.simulation_options(
            rtt=rtt,
            throughput=throughput * 1024 if throughput is not None else None,
            cpu_slowdown_multiplier=cpu_slowdown,
            max_concurrent_requests=max_concurrent_requests,
            max_connections_per_origin=max_connections_per_origin,
        )
        estimator = PageLoadEstimator(settings)
        result = estimator.estimate_file(graph_file, options)
    except (EstimateError, OSError, ValueError) as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()

    formatted_result = format_results(result, format or settings.default_output_format, verbose)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(formatted_result)
        click.echo(f"结果已保存到: {output_file}")
    else:
        click.echo(formatted_result)


@cli.command()
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="以JSON输出")
def inspect(graph_file: str, as_json: bool):
    """查看依赖图的基本信息"""
    try:
        graph, navigation = load_graph(graph_file)
    except (EstimateError, OSError, ValueError) as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()

    info = get_graph_info(graph)
    info["navigation"] = navigation.model_dump()

    if as_json:
        click.echo(json.dumps(info, indent=2, ensure_ascii=False))
        return

    click.echo(f"根节点: {info['root_id']} ({info['root_url'] or 'N/A'})")
    click.echo(f"节点数: {info['node_count']} (CPU {info['cpu_nodes']}, 网络 {info['network_nodes']})")

    data = []
    for node in graph.iter_nodes():
        if node.type == NodeType.NETWORK:
            data.append([node.id, "network", node.request.resource_type,
                         node.request.priority, node.request.url])
        else:
            data.append([node.id, "cpu", f"{node.duration / 1000:.1f} ms", "", ""])

    headers = ["ID", "类型", "资源类型/耗时", "优先级", "URL"]
    click.echo(tabulate(data, headers=headers, tablefmt="grid"))


@cli.command()
def list_metrics():
    """列出支持的指标"""
    data = []
    for metric_name in metric_registry.list_metrics():
        info = metric_registry.get_metric_info(metric_name)
        data.append([
            metric_name,
            info["name"],
            info["intercept"],
            info["optimistic"],
            info["pessimistic"],
            ", ".join(info["requires"]) or "-",
        ])

    headers = ["指标", "名称", "截距", "乐观系数", "悲观系数", "依赖"]
    table = tabulate(data, headers=headers, tablefmt="grid")
    click.echo(table)


def main():
    """主程序入口"""
    cli()


if __name__ == "__main__":
    main()
