"""
依赖图基础定义

节点只保存自身数据，依赖关系统一存放在DependencyGraph的索引表中。
克隆图时节点对象可以共享，结构（边）各自独立。
"""

from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional

from ..errors import MalformedGraphError


class NodeType(str, Enum):
    """节点类型"""
    CPU = "cpu"
    NETWORK = "network"


class BaseNode(ABC):
    """依赖图节点基础类"""

    def __init__(self, node_id: str):
        self._id = node_id

    @property
    def id(self) -> str:
        """稳定的节点标识"""
        return self._id

    @property
    @abstractmethod
    def type(self) -> NodeType:
        """节点类型"""
        pass

    @property
    @abstractmethod
    def start_time(self) -> float:
        """观测到的开始时间（微秒）"""
        pass

    @property
    @abstractmethod
    def end_time(self) -> float:
        """观测到的结束时间（微秒）"""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r})"


NodePredicate = Callable[[BaseNode], bool]


class DependencyGraph:
    """
    单根有向无环依赖图

    节点按插入顺序存放在扁平列表中，以整数索引寻址；
    每个节点的依赖（上游）和被依赖（下游）都是索引列表。
    """

    def __init__(self):
        self._nodes: List[BaseNode] = []
        self._index_by_id: Dict[str, int] = {}
        self._dependencies: List[List[int]] = []
        self._dependents: List[List[int]] = []

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> List[BaseNode]:
        """按索引排列的所有节点（只读副本）"""
        return list(self._nodes)

    def node_at(self, index: int) -> BaseNode:
        """按索引获取节点"""
        self._check_index(index)
        return self._nodes[index]

    def index_of(self, node_id: str) -> int:
        """按节点ID获取索引"""
        if node_id not in self._index_by_id:
            raise MalformedGraphError(f"Unknown node id: {node_id}")
        return self._index_by_id[node_id]

    def get_node(self, node_id: str) -> BaseNode:
        """按节点ID获取节点"""
        return self._nodes[self.index_of(node_id)]

    def add_node(self, node: BaseNode) -> int:
        """
        添加节点

        Args:
            node: 节点实例

        Returns:
            节点在图中的索引
        """
        if node.id in self._index_by_id:
            raise MalformedGraphError(f"Duplicate node id: {node.id}")

        index = len(self._nodes)
        self._nodes.append(node)
        self._index_by_id[node.id] = index
        self._dependencies.append([])
        self._dependents.append([])
        return index

    def add_dependency(self, dependent_id: str, dependency_id: str) -> None:
        """声明 dependent_id 依赖于 dependency_id"""
        self._link(self.index_of(dependent_id), self.index_of(dependency_id))

    def add_dependent(self, dependency_id: str, dependent_id: str) -> None:
        """声明 dependent_id 是 dependency_id 的下游"""
        self._link(self.index_of(dependent_id), self.index_of(dependency_id))

    def _link(self, dependent: int, dependency: int) -> None:
        if dependent == dependency:
            raise MalformedGraphError(f"Node {self._nodes[dependent].id} cannot depend on itself")
        # 重复的边忽略
        if dependency in self._dependencies[dependent]:
            return
        self._dependencies[dependent].append(dependency)
        self._dependents[dependency].append(dependent)

    def get_dependencies(self, index: int) -> List[int]:
        """获取节点的直接依赖索引"""
        self._check_index(index)
        return list(self._dependencies[index])

    def get_dependents(self, index: int) -> List[int]:
        """获取节点的直接下游索引"""
        self._check_index(index)
        return list(self._dependents[index])

    @property
    def root_index(self) -> int:
        """唯一没有依赖的节点的索引"""
        if not self._nodes:
            raise MalformedGraphError("Graph has no nodes")

        roots = [i for i, deps in enumerate(self._dependencies) if not deps]
        if len(roots) != 1:
            ids = [self._nodes[i].id for i in roots]
            raise MalformedGraphError(f"Graph must have exactly one root, found {len(roots)}: {ids}")
        return roots[0]

    @property
    def root(self) -> BaseNode:
        """根节点"""
        return self._nodes[self.root_index]

    def traverse_indices(self) -> Iterator[int]:
        """
        从根节点出发按广度优先顺序产生节点索引

        每个节点只产生一次（菱形依赖也不重复）。
        返回的是惰性、有限、不可重启的生成器。
        """
        root = self.root_index
        visited = {root}
        queue = deque([root])
        while queue:
            index = queue.popleft()
            yield index
            for next_index in self._dependents[index]:
                self._check_index(next_index)
                if next_index in visited:
                    continue
                visited.add(next_index)
                queue.append(next_index)

    def iter_nodes(self) -> Iterator[BaseNode]:
        """按遍历顺序惰性产生节点"""
        return (self._nodes[i] for i in self.traverse_indices())

    def traverse(self, visitor: Callable[[BaseNode], None]) -> None:
        """对每个可达节点调用一次 visitor"""
        for index in self.traverse_indices():
            visitor(self._nodes[index])

    def discovery_order(self) -> Dict[int, int]:
        """节点索引 -> 遍历序号"""
        return {index: position for position, index in enumerate(self.traverse_indices())}

    def topological_order(self) -> List[int]:
        """
        拓扑排序（Kahn算法）

        同一层级内按索引顺序输出，保证结果确定。

        Raises:
            MalformedGraphError: 图中存在环
        """
        in_degree = [len(deps) for deps in self._dependencies]
        ready = deque(i for i, degree in enumerate(in_degree) if degree == 0)
        order = []
        while ready:
            index = ready.popleft()
            order.append(index)
            for dependent in self._dependents[index]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    ready.append(dependent)

        if len(order) != len(self._nodes):
            stuck = [self._nodes[i].id for i, degree in enumerate(in_degree) if degree > 0]
            raise MalformedGraphError(f"Graph contains a cycle through nodes: {stuck}")
        return order

    def has_cycle(self) -> bool:
        """检查图中是否存在环"""
        try:
            self.topological_order()
        except MalformedGraphError:
            return True
        return False

    def validate(self) -> None:
        """校验单根、无环；不合法时抛出 MalformedGraphError"""
        self.topological_order()
        root = self.root_index
        reachable = sum(1 for _ in self.traverse_indices())
        if reachable != len(self._nodes):
            raise MalformedGraphError(
                f"{len(self._nodes) - reachable} nodes are unreachable from root {self._nodes[root].id}"
            )

    def clone_with_relationships(self, predicate: Optional[NodePredicate] = None) -> "DependencyGraph":
        """
        按条件克隆子图

        只保留满足 predicate 的节点。根节点不经过 predicate 判断、始终保留，保证克隆后仍为单根。
        被剔除节点两侧的依赖路径会被缩短为直接边：A->B->C 中剔除B时，克隆图中存在 A->C。
        源图不会被修改。

        Args:
            predicate: 节点过滤条件，None表示保留全部节点

        Returns:
            新的依赖图

        Raises:
            MalformedGraphError: 源图存在环或不是单根
        """
        order = self.topological_order()
        root = self.root_index

        keep = [False] * len(self._nodes)
        for index in order:
            keep[index] = index == root or predicate is None or bool(predicate(self._nodes[index]))

        # frontier[i]: 沿着只经过被剔除节点的路径向上能到达的最近保留节点
        frontier: List[List[int]] = [[] for _ in self._nodes]
        for index in order:
            seen = set()
            nearest = []
            for dependency in self._dependencies[index]:
                candidates = [dependency] if keep[dependency] else frontier[dependency]
                for candidate in candidates:
                    if candidate not in seen:
                        seen.add(candidate)
                        nearest.append(candidate)
            frontier[index] = nearest

        clone = DependencyGraph()
        new_index: Dict[int, int] = {}
        for index in range(len(self._nodes)):
            if keep[index]:
                new_index[index] = clone.add_node(self._nodes[index])

        for index, cloned in new_index.items():
            for dependency in frontier[index]:
                clone._link(cloned, new_index[dependency])

        return clone

    def count_by_type(self) -> Dict[str, int]:
        """按节点类型统计数量"""
        counts = {node_type.value: 0 for node_type in NodeType}
        for node in self._nodes:
            counts[node.type.value] += 1
        return counts

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._nodes):
            raise MalformedGraphError(f"Dangling edge to node index {index}")
