"""配置管理模块 - 处理steadycall的默认重试与门控参数"""

import os
import tomllib
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from steadycall.core.exceptions import ConfigurationError
from steadycall.core.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".steadycall" / "config.toml"


@dataclass
class RetrySettings:
    """重试默认配置"""

    max_attempts: int = 3
    base_delay: float = 1.0


@dataclass
class GateSettings:
    """防抖/节流默认配置(秒)"""

    debounce_delay: float = 0.3
    throttle_delay: float = 0.3


@dataclass
class LoggingSettings:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class SteadyCallConfig:
    """steadycall主配置"""

    retry: RetrySettings = field(default_factory=RetrySettings)
    gates: GateSettings = field(default_factory=GateSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "SteadyCallConfig":
        """从字典创建配置"""
        return cls(
            retry=RetrySettings(**config_dict.get("retry", {})),
            gates=GateSettings(**config_dict.get("gates", {})),
            logging=LoggingSettings(**config_dict.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "retry": asdict(self.retry),
            "gates": asdict(self.gates),
            "logging": asdict(self.logging),
        }


def _deep_update(target: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict):
            target[key] = _deep_update(target.get(key, {}), value)
        else:
            target[key] = value
    return target


def _drop_none(section: dict[str, Any]) -> dict[str, Any]:
    # TOML has no null
    return {
        key: _drop_none(value) if isinstance(value, dict) else value
        for key, value in section.items()
        if value is not None
    }


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            use_env: 是否用环境变量覆盖文件配置
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> SteadyCallConfig:
        """加载配置"""
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigurationError(
                    f"Failed to load config from {self.config_path}: {e}",
                    config_path=str(self.config_path),
                ) from e
            logger.debug("Loaded config file {}", self.config_path)

        if self.use_env:
            _deep_update(config_dict, load_config_from_env())

        try:
            return SteadyCallConfig.from_dict(config_dict)
        except TypeError as e:
            raise ConfigurationError(
                f"Unknown option in {self.config_path}: {e}",
                config_path=str(self.config_path),
            ) from e

    def get_config(self) -> SteadyCallConfig:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置"""
        config_dict = _deep_update(self.config.to_dict(), updates)
        self.config = SteadyCallConfig.from_dict(config_dict)

    def save_config(self) -> None:
        """保存配置到文件"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "wb") as f:
            tomli_w.dump(_drop_none(self.config.to_dict()), f)
        logger.info("Saved config to {}", self.config_path)


def get_default_config() -> SteadyCallConfig:
    """获取默认配置"""
    return SteadyCallConfig()


def _env_number(name: str, parse: Callable[[str], Any]) -> Any:
    """读取数值型环境变量，未设置时返回None"""
    raw = os.getenv(name)
    if raw is None:
        return None
    try:
        return parse(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid value for {name}: {raw!r}",
            details={"env_var": name, "value": raw},
        ) from e


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置

    Raises:
        ConfigurationError: 数值型变量无法解析
    """
    config: dict[str, Any] = {}

    # 重试配置
    retry_config: dict[str, Any] = {}
    max_attempts = _env_number("STEADYCALL_RETRY_MAX_ATTEMPTS", int)
    if max_attempts is not None:
        retry_config["max_attempts"] = max_attempts
    base_delay = _env_number("STEADYCALL_RETRY_BASE_DELAY", float)
    if base_delay is not None:
        retry_config["base_delay"] = base_delay

    if retry_config:
        config["retry"] = retry_config

    # 门控配置
    gate_config: dict[str, Any] = {}
    debounce_delay = _env_number("STEADYCALL_DEBOUNCE_DELAY", float)
    if debounce_delay is not None:
        gate_config["debounce_delay"] = debounce_delay
    throttle_delay = _env_number("STEADYCALL_THROTTLE_DELAY", float)
    if throttle_delay is not None:
        gate_config["throttle_delay"] = throttle_delay

    if gate_config:
        config["gates"] = gate_config

    # 日志配置
    logging_config: dict[str, Any] = {}
    logging_level = os.getenv("STEADYCALL_LOGGING_LEVEL")
    if logging_level is not None:
        logging_config["level"] = logging_level
    logging_file = os.getenv("STEADYCALL_LOGGING_FILE")
    if logging_file is not None:
        logging_config["file"] = logging_file

    if logging_config:
        config["logging"] = logging_config

    return config


def apply_logging_settings(settings: LoggingSettings) -> None:
    """按配置安装结构化日志输出"""
    configure_logging(level=settings.level, file_path=settings.file)
