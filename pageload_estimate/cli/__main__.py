"""
CLI模块的主入口

支持使用 python -m pageload_estimate.cli 方式运行
"""

from .commands import main

if __name__ == "__main__":
    main()
