"""
全局配置模块。

集中管理物理常量与默认参数：
- 固定时间步长（默认 20ms，可配置）
- 水体密度、重力加速度、空气阻尼
- 交互事件环形缓冲容量与事件最大存活时间

所有字段均可通过 WATERLINE_ 前缀的环境变量覆盖，例如 WATERLINE_FIXED_DT=0.01。
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置。"""

    model_config = SettingsConfigDict(env_prefix="WATERLINE_")

    app_name: str = "Waterline Backend"
    log_level: str = "INFO"

    # 物理常量
    gravity: float = 9.81  # 重力加速度（m/s²）
    water_density: float = 1000.0  # 水体密度（kg/m³）
    air_drag: float = 0.05  # 空气中的线性阻尼
    air_angular_drag: float = 0.05  # 空气中的角阻尼
    water_base_level: float = 0.0  # 静水面高度（米）

    # 交互事件
    event_ring_capacity: int = 2  # 同时跟踪的交互事件数量
    interaction_max_lifetime: float = 1.5  # 交互事件最大存活时间（秒）

    # 时间
    fixed_dt: float = 0.02  # 固定物理步长（秒）


settings = Settings()
