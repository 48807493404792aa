"""
命令行接口模块

提供命令行工具，作为用户与系统交互的主要方式。
"""

from .commands import cli, main

__all__ = ["cli", "main"]
