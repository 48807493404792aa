"""
异常定义

估算引擎中所有错误都不可恢复：不重试，也不返回部分结果。
"""


class EstimateError(Exception):
    """估算引擎异常基类"""


class MissingDependencyError(EstimateError):
    """缺少前置指标结果（如计算TTI时没有传入LCP结果），属于调用顺序错误"""


class MalformedGraphError(EstimateError):
    """依赖图结构非法：存在环、悬空边、重复ID或多个根节点"""


class SimulatorError(EstimateError):
    """模拟器内部失败，指标层原样向上抛出"""


class MissingNavigationTimestampError(EstimateError):
    """剪枝策略所需的导航时间戳（如LCP时间点）缺失"""


class GraphDocumentError(EstimateError):
    """依赖图JSON文档校验失败"""
