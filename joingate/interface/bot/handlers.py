"""Telegram update handlers.

Handlers are thin: they translate updates into use case requests and open a
request scope on the container shared with the HTTP server.
"""

import logging

from dishka import AsyncContainer
from telegram import Bot, Update
from telegram.ext import (
    Application,
    ChatJoinRequestHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from joingate.application.messages import Messages
from joingate.application.usecase.join import (
    CompleteVerificationUseCase,
    IssueChallengeUseCase,
)
from joingate.application.usecase.join.complete_verification import (
    CompleteVerificationRequest,
)
from joingate.application.usecase.join.issue_challenge import IssueChallengeRequest
from joingate.domain.value import ChannelId, GroupId, ResponseTransport, UserId

logger = logging.getLogger(__name__)

CONTAINER_KEY = "container"


def _container(context: ContextTypes.DEFAULT_TYPE) -> AsyncContainer:
    return context.application.bot_data[CONTAINER_KEY]


async def on_join_request(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Answer a join request with a verification challenge."""
    join_request = update.chat_join_request
    if join_request is None:
        return

    user = join_request.from_user
    async with _container(context)() as request_container:
        use_case = await request_container.get(IssueChallengeUseCase)
        await use_case.execute(
            IssueChallengeRequest(
                user_id=UserId(user.id),
                group_id=GroupId(join_request.chat.id),
                channel_id=ChannelId(join_request.user_chat_id),
                user_display_name=user.full_name or user.username,
            )
        )


async def on_private_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Treat a private message from a pending requester as a challenge response."""
    message = update.effective_message
    if message is None or not message.text:
        return

    channel_id = ChannelId(message.chat_id)
    async with _container(context)() as request_container:
        use_case = await request_container.get(CompleteVerificationUseCase)
        if not await use_case.is_awaiting_response(channel_id):
            logger.debug(f"Ignoring message from channel {channel_id} without pending request")
            return

        await use_case.execute(
            CompleteVerificationRequest(
                payload=message.text.strip(),
                transport=ResponseTransport.CHAT,
                channel_id=channel_id,
            )
        )


async def on_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Greet users who open a private chat with the bot."""
    message = update.effective_message
    if message is None:
        return

    async with _container(context)() as request_container:
        messages = await request_container.get(Messages)
    await message.reply_text(messages.text("start"))


def register_handlers(application: Application, container: AsyncContainer) -> None:
    """Attach handlers and the shared container to a bot application."""
    application.bot_data[CONTAINER_KEY] = container

    application.add_handler(ChatJoinRequestHandler(on_join_request))
    application.add_handler(
        CommandHandler("start", on_start, filters=filters.ChatType.PRIVATE)
    )
    application.add_handler(
        MessageHandler(
            filters.ChatType.PRIVATE & filters.TEXT & ~filters.COMMAND,
            on_private_text,
        )
    )


def build_bot_application(bot: Bot, container: AsyncContainer) -> Application:
    """Build the polling application around the Bot shared with the transport.

    Args:
        bot: Bot instance provided by the container
        container: DI container shared with the HTTP server

    Returns:
        Application with all handlers registered (not yet started)
    """
    application = Application.builder().bot(bot).build()
    register_handlers(application, container)
    return application
