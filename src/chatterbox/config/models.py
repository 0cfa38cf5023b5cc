"""設定データクラス"""

from dataclasses import dataclass, field


@dataclass
class SlackConfig:
    """Slack接続設定"""

    bot_token: str
    app_token: str


@dataclass
class LLMConfig:
    """LLM設定（LiteLLMのcompletionに渡すdict）"""

    api_key: str
    model: str = "deepseek/deepseek-chat"
    api_base: str | None = None
    temperature: float = 1.0
    max_tokens: int = 1000


@dataclass
class BotConfig:
    """ボット1体分の設定

    Attributes:
        name: 表示名（ログの識別子としても使う）
        slack: Slack接続設定
        llm: LLM設定
        system_prompt: ボットの振る舞いを決める静的プロンプト
        post_comment_prompt_template: 投稿コメント用テンプレート（{postText} を含む）
        ignore_messages_older_than_minutes: 指定時はこの分数より古いメッセージを無視
        comment_probability: チャンネル投稿にコメントする確率（0.0〜1.0）
    """

    name: str
    slack: SlackConfig
    llm: LLMConfig
    system_prompt: str
    post_comment_prompt_template: str
    ignore_messages_older_than_minutes: int | None = None
    comment_probability: float = 1.0


@dataclass
class ContextConfig:
    """会話コンテキストの寿命設定"""

    base_ttl_seconds: int = 1800  # 30分
    active_ttl_seconds: int = 7200  # 2時間
    cleanup_interval_seconds: int = 300  # 5分


@dataclass
class HistoryConfig:
    """履歴の長さ設定

    Attributes:
        max_length: コンテキストに保持する最大件数
        relevant_length: プロンプトに含める直近の件数
    """

    max_length: int = 30
    relevant_length: int = 10


@dataclass
class MessagesConfig:
    """送受信メッセージ設定"""

    max_length: int = 4096
    max_safe_length: int = 10000
    reminder_interval: int = 10
    part_delay_seconds: float = 0.5


@dataclass
class ApiConfig:
    """Completion API 呼び出し設定"""

    max_retries: int = 3
    timeout_seconds: float = 30.0
    backoff_base_seconds: float = 1.0


@dataclass
class PostsConfig:
    """チャンネル投稿コメント設定"""

    min_text_length: int = 5


@dataclass
class HealthConfig:
    """ヘルスチェックサーバー設定"""

    enabled: bool = False
    port: int = 8080


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None
    debug_llm_messages: bool = False


@dataclass
class Config:
    """アプリケーション設定"""

    bots: list[BotConfig]
    context: ContextConfig = field(default_factory=ContextConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    messages: MessagesConfig = field(default_factory=MessagesConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    posts: PostsConfig = field(default_factory=PostsConfig)
    health: HealthConfig = field(default_factory=HealthConfig)
    logging: LoggingConfig | None = None
