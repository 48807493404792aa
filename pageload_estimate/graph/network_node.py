"""
网络请求节点
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from .base import BaseNode, NodeType


@dataclass
class NetworkRequest:
    """网络请求描述"""
    request_id: str
    url: str
    resource_type: str = "Other"        # Document / Script / Stylesheet / Image ...
    priority: str = "Low"               # VeryLow / Low / Medium / High / VeryHigh
    transfer_size: int = 0              # 传输字节数
    network_request_time: float = 0.0   # 请求发出时间（毫秒）
    network_end_time: float = 0.0       # 请求结束时间（毫秒），未完成时可能为负
    initiator_type: str = "other"       # parser / script / preload / other
    protocol: str = "http/1.1"


class NetworkNode(BaseNode):
    """网络请求节点"""

    def __init__(self, request: NetworkRequest, is_main_document: bool = False,
                 node_id: Optional[str] = None):
        super().__init__(node_id or request.request_id)
        self.request = request
        self._is_main_document = is_main_document

    @property
    def type(self) -> NodeType:
        return NodeType.NETWORK

    @property
    def start_time(self) -> float:
        return self.request.network_request_time * 1000

    @property
    def end_time(self) -> float:
        return self.request.network_end_time * 1000

    @property
    def origin(self) -> str:
        """请求所属的源（scheme://host[:port]）"""
        parts = urlsplit(self.request.url)
        if not parts.scheme or not parts.netloc:
            return self.request.url
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def is_secure(self) -> bool:
        return urlsplit(self.request.url).scheme in ("https", "wss")

    @property
    def initiator_type(self) -> str:
        return self.request.initiator_type

    def is_main_document(self) -> bool:
        return self._is_main_document

    def has_render_blocking_priority(self) -> bool:
        """
        是否具有阻塞渲染的优先级

        VeryHigh 的请求，以及 High 优先级的脚本和文档。
        """
        priority = self.request.priority
        resource_type = self.request.resource_type
        if priority == "VeryHigh":
            return True
        return priority == "High" and resource_type in ("Script", "Document")
