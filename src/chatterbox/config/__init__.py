"""設定管理モジュール"""

from chatterbox.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
)
from chatterbox.config.models import (
    ApiConfig,
    BotConfig,
    Config,
    ContextConfig,
    HealthConfig,
    HistoryConfig,
    LLMConfig,
    LoggingConfig,
    MessagesConfig,
    PostsConfig,
    SlackConfig,
)

__all__ = [
    "ApiConfig",
    "BotConfig",
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "ContextConfig",
    "EnvironmentVariableError",
    "HealthConfig",
    "HistoryConfig",
    "LLMConfig",
    "LoggingConfig",
    "MessagesConfig",
    "PostsConfig",
    "SlackConfig",
    "expand_env_vars",
    "load_config",
]
