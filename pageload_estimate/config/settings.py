"""
全局系统设置

定义系统级配置参数和默认值，支持通过 PAGELOAD_ESTIMATE_<字段名> 环境变量或 .env 文件覆盖。
"""

import logging
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..simulator.base import SimulationOptions

ENV_PREFIX = "PAGELOAD_ESTIMATE_"


class Settings(BaseSettings):
    """系统设置类"""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # 日志配置
    log_level: str = Field(default="WARNING", description="日志级别")
    log_file: Optional[str] = Field(default=None, description="日志文件路径")

    # 输出配置
    default_output_format: str = Field(default="table", description="默认输出格式")

    # 模拟节流配置（移动端慢速4G）
    rtt_ms: float = Field(default=150.0, ge=0, description="往返时延(ms)")
    throughput_kbps: float = Field(default=1.6 * 1024, gt=0, description="下行吞吐量(Kbps)")
    cpu_slowdown_multiplier: float = Field(default=4.0, gt=0, description="CPU降速倍数")
    max_concurrent_requests: int = Field(default=10, ge=1, description="全局最大并发连接数")
    max_connections_per_origin: int = Field(default=6, ge=1, description="每个源的最大连接数")

    def simulation_options(self, **overrides) -> SimulationOptions:
        """根据设置生成模拟配置，overrides 中为 None 的项忽略"""
        options = {
            "rtt": self.rtt_ms,
            "throughput": self.throughput_kbps * 1024,
            "cpu_slowdown_multiplier": self.cpu_slowdown_multiplier,
            "max_concurrent_requests": self.max_concurrent_requests,
            "max_connections_per_origin": self.max_connections_per_origin,
        }
        options.update({key: value for key, value in overrides.items() if value is not None})
        return SimulationOptions(**options)


class ConfigManager:
    """配置管理器"""

    def __init__(self):
        self._settings: Optional[Settings] = None

    def get_settings(self) -> Settings:
        """获取设置实例（单例模式）"""
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    def update_settings(self, **kwargs) -> None:
        """更新设置，新值同样经过校验"""
        settings = self.get_settings()
        for key in kwargs:
            if key not in Settings.model_fields:
                raise ValueError(f"Unknown setting: {key}")
        self._settings = Settings(**{**settings.model_dump(), **kwargs})

    def reset(self) -> None:
        """丢弃缓存的设置，下次访问时重新读取环境变量"""
        self._settings = None


# 全局配置管理器实例
config_manager = ConfigManager()


def get_settings() -> Settings:
    """获取全局设置"""
    return config_manager.get_settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """按设置配置日志级别和输出文件"""
    settings = settings or get_settings()
    handlers = None
    if settings.log_file:
        handlers = [logging.FileHandler(settings.log_file, encoding="utf-8")]
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )
