"""YAML設定ファイルの読み込みと環境変数展開"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

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


class ConfigError(Exception):
    """設定関連の基底例外"""


class ConfigValidationError(ConfigError):
    """設定値のバリデーションエラー"""


class EnvironmentVariableError(ConfigError):
    """環境変数が見つからないエラー"""


# 環境変数パターン: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """文字列中の ${VAR_NAME} を環境変数の値に置換する

    Args:
        value: 置換対象の文字列

    Returns:
        環境変数が展開された文字列

    Raises:
        EnvironmentVariableError: 環境変数が未設定
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """データ構造を再帰的に走査し、文字列中の環境変数を展開する"""
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _validate_required_field(data: dict[str, Any], field: str, parent: str = "") -> Any:
    """必須フィールドの存在を検証する

    Args:
        data: 検証対象のdict
        field: フィールド名
        parent: 親フィールド名（エラーメッセージ用）

    Returns:
        フィールドの値

    Raises:
        ConfigValidationError: フィールドが存在しない
    """
    if field not in data or data[field] is None or data[field] == "":
        full_path = f"{parent}.{field}" if parent else field
        raise ConfigValidationError(f"Required field '{full_path}' is missing")
    return data[field]


def _optional_section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """任意セクションを取得する（未指定なら空dict）"""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigValidationError(f"Section '{name}' must be a mapping")
    return section


def _load_bot(bot_data: dict[str, Any], index: int) -> BotConfig:
    """bots リストの1要素を BotConfig に変換する"""
    path = f"bots[{index}]"
    if not isinstance(bot_data, dict):
        raise ConfigValidationError(f"'{path}' must be a mapping")

    slack_data = _validate_required_field(bot_data, "slack", path)
    slack = SlackConfig(
        bot_token=_validate_required_field(slack_data, "bot_token", f"{path}.slack"),
        app_token=_validate_required_field(slack_data, "app_token", f"{path}.slack"),
    )

    llm_data = _validate_required_field(bot_data, "llm", path)
    llm = LLMConfig(
        api_key=_validate_required_field(llm_data, "api_key", f"{path}.llm"),
        model=llm_data.get("model", "deepseek/deepseek-chat"),
        api_base=llm_data.get("api_base"),
        temperature=llm_data.get("temperature", 1.0),
        max_tokens=llm_data.get("max_tokens", 1000),
    )

    template = _validate_required_field(bot_data, "post_comment_prompt_template", path)
    if "{postText}" not in template:
        raise ConfigValidationError(
            f"'{path}.post_comment_prompt_template' must contain {{postText}}"
        )

    comment_probability = float(bot_data.get("comment_probability", 1.0))
    if not 0.0 <= comment_probability <= 1.0:
        raise ConfigValidationError(
            f"'{path}.comment_probability' must be between 0.0 and 1.0"
        )

    return BotConfig(
        name=bot_data.get("name") or f"bot-{index}",
        slack=slack,
        llm=llm,
        system_prompt=_validate_required_field(bot_data, "system_prompt", path),
        post_comment_prompt_template=template,
        ignore_messages_older_than_minutes=bot_data.get(
            "ignore_messages_older_than_minutes"
        ),
        comment_probability=comment_probability,
    )


def load_config(path: str | Path) -> Config:
    """設定ファイルを読み込む

    Args:
        path: config.yaml のパス

    Returns:
        Config オブジェクト

    Raises:
        FileNotFoundError: ファイルが存在しない
        ConfigValidationError: 必須項目が欠落
        EnvironmentVariableError: 環境変数が未設定
        yaml.YAMLError: YAML構文エラー
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f) or {}

    # 環境変数を展開
    data = _expand_recursive(raw_data)

    bots_data = _validate_required_field(data, "bots")
    if not isinstance(bots_data, list):
        raise ConfigValidationError("Field 'bots' must be a list")
    if not bots_data:
        raise ConfigValidationError("At least one bot must be configured")
    bots = [_load_bot(bot_data, i) for i, bot_data in enumerate(bots_data)]

    names = [bot.name for bot in bots]
    if len(names) != len(set(names)):
        raise ConfigValidationError("Bot names must be unique")

    context_data = _optional_section(data, "context")
    context = ContextConfig(
        base_ttl_seconds=context_data.get("base_ttl_seconds", 1800),
        active_ttl_seconds=context_data.get("active_ttl_seconds", 7200),
        cleanup_interval_seconds=context_data.get("cleanup_interval_seconds", 300),
    )

    history_data = _optional_section(data, "history")
    history = HistoryConfig(
        max_length=history_data.get("max_length", 30),
        relevant_length=history_data.get("relevant_length", 10),
    )
    if history.relevant_length > history.max_length:
        raise ConfigValidationError(
            "'history.relevant_length' must not exceed 'history.max_length'"
        )

    messages_data = _optional_section(data, "messages")
    messages = MessagesConfig(
        max_length=messages_data.get("max_length", 4096),
        max_safe_length=messages_data.get("max_safe_length", 10000),
        reminder_interval=messages_data.get("reminder_interval", 10),
        part_delay_seconds=messages_data.get("part_delay_seconds", 0.5),
    )

    api_data = _optional_section(data, "api")
    api = ApiConfig(
        max_retries=api_data.get("max_retries", 3),
        timeout_seconds=api_data.get("timeout_seconds", 30.0),
        backoff_base_seconds=api_data.get("backoff_base_seconds", 1.0),
    )

    posts_data = _optional_section(data, "posts")
    posts = PostsConfig(min_text_length=posts_data.get("min_text_length", 5))

    health_data = _optional_section(data, "health")
    health = HealthConfig(
        enabled=health_data.get("enabled", False),
        port=health_data.get("port", 8080),
    )

    # LoggingConfig (optional)
    logging_config: LoggingConfig | None = None
    logging_data = data.get("logging")
    if logging_data:
        logging_config = LoggingConfig(
            level=logging_data.get("level", "INFO"),
            format=logging_data.get(
                "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ),
            loggers=logging_data.get("loggers"),
            debug_llm_messages=logging_data.get("debug_llm_messages", False),
        )

    return Config(
        bots=bots,
        context=context,
        history=history,
        messages=messages,
        api=api,
        posts=posts,
        health=health,
        logging=logging_config,
    )
