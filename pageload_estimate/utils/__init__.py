"""
工具模块
"""

from .formatters import format_duration, format_results

__all__ = ["format_duration", "format_results"]
