"""
CPU任务节点

对应主线程上的一个顶层任务及其子事件。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import BaseNode, NodeType


@dataclass
class TraceEvent:
    """trace事件的最小描述"""
    name: str
    ts: float  # 开始时间（微秒）
    dur: float = 0.0  # 持续时间（微秒）
    args: Dict[str, Any] = field(default_factory=dict)

    @property
    def url(self) -> Optional[str]:
        """EvaluateScript 等事件关联的脚本URL"""
        data = self.args.get("data") or {}
        return data.get("url")


class CpuNode(BaseNode):
    """CPU任务节点"""

    def __init__(self, node_id: str, event: TraceEvent, child_events: Optional[List[TraceEvent]] = None):
        super().__init__(node_id)
        self.event = event
        self.child_events = child_events or []

    @property
    def type(self) -> NodeType:
        return NodeType.CPU

    @property
    def start_time(self) -> float:
        return self.event.ts

    @property
    def end_time(self) -> float:
        return self.event.ts + self.event.dur

    @property
    def duration(self) -> float:
        """任务耗时（微秒）"""
        return self.event.dur

    def did_perform_layout(self) -> bool:
        """任务中是否执行了布局"""
        return any(evt.name == "Layout" for evt in self.child_events)

    def has_child_event(self, name: str) -> bool:
        return any(evt.name == name for evt in self.child_events)

    def get_evaluate_script_urls(self) -> List[str]:
        """任务中执行过的脚本URL（按出现顺序去重）"""
        urls = []
        for evt in self.child_events:
            if evt.name != "EvaluateScript":
                continue
            url = evt.url
            if url and url not in urls:
                urls.append(url)
        return urls
