"""Bot instance wiring and the multi-bot fleet."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from slack_bolt.async_app import AsyncApp

from chatterbox.application.handlers import MessageHandler
from chatterbox.application.services import ContextSweeper
from chatterbox.application.use_cases import CommentPostUseCase, ReplyToMentionUseCase
from chatterbox.config import BotConfig, Config, SlackConfig
from chatterbox.domain.services import (
    ActiveContextCounts,
    ContextStore,
    DispatchPolicy,
    PromptAssembler,
)
from chatterbox.infrastructure.llm import (
    CompletionGateway,
    LLMClient,
    LLMTopicInferrer,
    RetryPolicy,
)
from chatterbox.infrastructure.slack import (
    SlackAppRunner,
    SlackEventAdapter,
    SlackMessagingService,
    create_slack_app,
)
from chatterbox.presentation.slack_handlers import register_handlers

logger = logging.getLogger(__name__)

AppFactory = Callable[[SlackConfig], AsyncApp]


class BotInstance:
    """One configured bot: its own Slack app, context store and gateway.

    Nothing is shared between instances, so one bot's memory growth,
    failure or rate limiting does not affect the others.
    """

    def __init__(
        self,
        bot_config: BotConfig,
        config: Config,
        app_factory: AppFactory = create_slack_app,
    ) -> None:
        """Initialize the instance.

        Args:
            bot_config: Configuration of this bot.
            config: Application-wide settings.
            app_factory: Creates the Slack app for a SlackConfig.
        """
        self._bot_config = bot_config
        self._config = config
        self._app_factory = app_factory
        self.context_store = ContextStore(
            config.context,
            max_history=config.history.max_length,
            name=bot_config.name,
        )
        self._sweeper = ContextSweeper(
            self.context_store,
            config.context.cleanup_interval_seconds,
            name=bot_config.name,
        )
        self._runner: SlackAppRunner | None = None
        self.message_handler: MessageHandler | None = None

    @property
    def name(self) -> str:
        """Bot display name."""
        return self._bot_config.name

    @property
    def is_connected(self) -> bool:
        """Check if the Slack connection has been started."""
        return self._runner is not None and self._runner.is_connected

    def count_active(self) -> ActiveContextCounts:
        """Live contexts of this bot."""
        return self.context_store.count_active()

    async def setup(self) -> AsyncApp:
        """Authenticate with Slack and wire all components.

        Returns:
            The Slack app with handlers registered.

        Raises:
            SlackApiError: If authentication fails.
        """
        bot_config = self._bot_config
        config = self._config
        name = bot_config.name

        app = self._app_factory(bot_config.slack)
        messaging_service = SlackMessagingService(
            app.client, config.messages, name=name
        )
        bot_id = await messaging_service.get_bot_user_id()
        startup_time = datetime.now(timezone.utc)
        logger.info("[%s] Bot user ID: %s", name, bot_id)

        llm_client = LLMClient(bot_config.llm, timeout=config.api.timeout_seconds)
        debug_llm_messages = bool(config.logging and config.logging.debug_llm_messages)
        gateway = CompletionGateway(
            llm_client,
            RetryPolicy(
                max_retries=config.api.max_retries,
                backoff_base_seconds=config.api.backoff_base_seconds,
            ),
            timeout_seconds=config.api.timeout_seconds,
            name=name,
            debug_llm_messages=debug_llm_messages,
        )
        topic_inferrer = LLMTopicInferrer(llm_client, name=name)
        prompt_assembler = PromptAssembler(
            bot_config.system_prompt,
            relevant_history_length=config.history.relevant_length,
            reminder_interval=config.messages.reminder_interval,
        )
        dispatch_policy = DispatchPolicy(
            bot_id=bot_id,
            bot_handle=f"<@{bot_id}>",
            startup_time=startup_time,
            ignore_older_than_minutes=bot_config.ignore_messages_older_than_minutes,
            comment_probability=bot_config.comment_probability,
        )

        comment_post_use_case = CommentPostUseCase(
            bot_config=bot_config,
            bot_id=bot_id,
            context_store=self.context_store,
            topic_inferrer=topic_inferrer,
            prompt_assembler=prompt_assembler,
            completion_service=gateway,
            messaging_service=messaging_service,
            min_text_length=config.posts.min_text_length,
            max_safe_length=config.messages.max_safe_length,
        )
        reply_use_case = ReplyToMentionUseCase(
            bot_config=bot_config,
            bot_id=bot_id,
            dispatch_policy=dispatch_policy,
            context_store=self.context_store,
            topic_inferrer=topic_inferrer,
            prompt_assembler=prompt_assembler,
            completion_service=gateway,
            messaging_service=messaging_service,
            max_safe_length=config.messages.max_safe_length,
        )
        self.message_handler = MessageHandler(
            name, dispatch_policy, comment_post_use_case, reply_use_case
        )

        register_handlers(app, self.message_handler, SlackEventAdapter(app.client), name)
        self._runner = SlackAppRunner(app, bot_config.slack.app_token)
        return app

    async def run(self) -> None:
        """Set up the bot, then run Socket Mode and the sweeper until cancelled."""
        await self.setup()
        runner = self._runner
        if runner is None:
            raise RuntimeError(f"[{self.name}] Slack runner was not created")

        logger.info("[%s] Starting Socket Mode handler...", self.name)
        sweeper_task = asyncio.create_task(self._sweeper.start())
        try:
            # Blocks for the lifetime of the connection
            await runner.start()
        finally:
            await self._sweeper.stop()
            sweeper_task.cancel()
            await asyncio.gather(sweeper_task, return_exceptions=True)

    async def close(self, timeout: float = 5.0) -> None:
        """Stop the sweeper and close the Slack connection."""
        await self._sweeper.stop()
        if self._runner is not None:
            closed = await self._runner.close(timeout=timeout)
            if not closed:
                logger.warning("[%s] Runner close timed out", self.name)
        logger.info("[%s] Bot stopped", self.name)


class BotFleet:
    """Runs every configured bot as an independent asyncio task."""

    def __init__(
        self,
        bots: list[BotInstance],
        on_exhausted: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the fleet.

        Args:
            bots: Bot instances to run.
            on_exhausted: Called once every bot task has ended on its own,
                e.g. because all of them failed to authenticate.
        """
        self.bots = bots
        self.exhausted = False
        self._on_exhausted = on_exhausted
        self._stopping = False
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @classmethod
    def from_config(
        cls,
        config: Config,
        app_factory: AppFactory = create_slack_app,
        on_exhausted: Callable[[], None] | None = None,
    ) -> "BotFleet":
        """Create one BotInstance per configured bot."""
        return cls(
            [BotInstance(bot, config, app_factory) for bot in config.bots],
            on_exhausted=on_exhausted,
        )

    @property
    def is_running(self) -> bool:
        """Check if at least one bot task is alive."""
        return any(not task.done() for task in self._tasks.values())

    def start(self) -> None:
        """Start one task per bot."""
        for bot in self.bots:
            task = asyncio.create_task(bot.run(), name=f"bot:{bot.name}")
            task.add_done_callback(self._on_bot_done)
            self._tasks[bot.name] = task
            logger.info("Started bot %s", bot.name)

    def _on_bot_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Bot task %s stopped with error: %s",
                task.get_name(),
                error,
                exc_info=error,
            )
        if self._stopping or self.is_running or self.exhausted:
            return
        logger.error("All bots have stopped")
        self.exhausted = True
        if self._on_exhausted is not None:
            self._on_exhausted()

    async def stop(self, timeout: float = 5.0) -> None:
        """Close every bot and cancel their tasks."""
        self._stopping = True
        await asyncio.gather(
            *(bot.close(timeout=timeout) for bot in self.bots),
            return_exceptions=True,
        )
        for task in self._tasks.values():
            task.cancel()
        await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        self._tasks.clear()
