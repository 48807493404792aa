"""
依赖图文档加载

从JSON文档构建依赖图。文档由外部的trace处理流程生成，格式如下：

    {
      "navigation": {"first_contentful_paint": 1200000, "largest_contentful_paint": 1800000},
      "nodes": [
        {"id": "1", "type": "network", "is_main_document": true,
         "request": {"url": "https://example.com/", "resource_type": "Document", ...}},
        {"id": "2", "type": "cpu", "event": {"name": "RunTask", "ts": 1000, "dur": 5000},
         "child_events": [{"name": "ParseHTML", "ts": 1000, "dur": 4000}]}
      ],
      "edges": [{"from": "1", "to": "2"}]
    }

edges 中 from 为依赖（上游），to 为依赖它的下游节点。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from ..errors import GraphDocumentError
from .base import DependencyGraph
from .cpu_node import CpuNode, TraceEvent
from .navigation import NavigationTimestamps
from .network_node import NetworkNode, NetworkRequest


class TraceEventDocument(BaseModel):
    name: str
    ts: float
    dur: float = 0.0
    args: Dict[str, Any] = Field(default_factory=dict)
    url: Optional[str] = Field(default=None, description="EvaluateScript 的脚本URL简写")

    def to_event(self) -> TraceEvent:
        args = dict(self.args)
        if self.url is not None:
            args["data"] = dict(args.get("data") or {}, url=self.url)
        return TraceEvent(name=self.name, ts=self.ts, dur=self.dur, args=args)


class RequestDocument(BaseModel):
    url: str
    request_id: Optional[str] = None
    resource_type: str = "Other"
    priority: str = "Low"
    transfer_size: int = Field(default=0, ge=0)
    network_request_time: float = 0.0
    network_end_time: float = 0.0
    initiator_type: str = "other"
    protocol: str = "http/1.1"


class NodeDocument(BaseModel):
    id: str
    type: Literal["cpu", "network"]
    is_main_document: bool = False
    request: Optional[RequestDocument] = None
    event: Optional[TraceEventDocument] = None
    child_events: List[TraceEventDocument] = Field(default_factory=list)


class EdgeDocument(BaseModel):
    source: str = Field(alias="from")
    target: str = Field(alias="to")


class GraphDocument(BaseModel):
    """依赖图JSON文档"""
    navigation: NavigationTimestamps = Field(default_factory=NavigationTimestamps)
    nodes: List[NodeDocument]
    edges: List[EdgeDocument] = Field(default_factory=list)

    def to_graph(self) -> DependencyGraph:
        """构建并校验依赖图"""
        graph = DependencyGraph()
        for node_doc in self.nodes:
            graph.add_node(_build_node(node_doc))

        for edge in self.edges:
            graph.add_dependency(edge.target, edge.source)

        graph.validate()
        return graph


def _build_node(node_doc: NodeDocument) -> Union[CpuNode, NetworkNode]:
    if node_doc.type == "network":
        if node_doc.request is None:
            raise GraphDocumentError(f"Network node {node_doc.id} has no request")
        request_fields = node_doc.request.model_dump()
        request_fields["request_id"] = request_fields["request_id"] or node_doc.id
        return NetworkNode(NetworkRequest(**request_fields),
                           is_main_document=node_doc.is_main_document,
                           node_id=node_doc.id)

    if node_doc.event is None:
        raise GraphDocumentError(f"CPU node {node_doc.id} has no event")
    return CpuNode(node_doc.id, node_doc.event.to_event(),
                   [evt.to_event() for evt in node_doc.child_events])


def parse_graph_document(data: Dict[str, Any]) -> Tuple[DependencyGraph, NavigationTimestamps]:
    """
    解析依赖图文档

    Args:
        data: JSON解析后的字典

    Returns:
        (依赖图, 导航时间戳)
    """
    try:
        document = GraphDocument.model_validate(data)
    except ValidationError as e:
        raise GraphDocumentError(f"Invalid graph document: {e}") from e
    return document.to_graph(), document.navigation


def load_graph(path: Union[str, Path]) -> Tuple[DependencyGraph, NavigationTimestamps]:
    """从文件加载依赖图"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_graph_document(data)
