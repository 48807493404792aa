"""
导航时间戳

记录一次页面导航中观测到的绘制时间点，用作剪枝的截止时间。
"""

from typing import Optional
from pydantic import BaseModel, Field


class NavigationTimestamps(BaseModel):
    """导航关键时间点（微秒，与节点时间同一时钟）"""
    first_contentful_paint: Optional[float] = Field(default=None, description="首次内容绘制时间")
    largest_contentful_paint: Optional[float] = Field(default=None, description="最大内容绘制时间")
