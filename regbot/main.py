"""
Event registration bot.
Entry point: creates the bot and the Supabase functions handle, registers routers + middleware,
handles graceful shutdown.
"""
import asyncio
import logging
import signal
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import ErrorEvent

from regbot.config import settings
from regbot.middlewares import ApiMiddleware
from regbot.services.api_client import SupabaseFunctions
from regbot.services.screen_registry import ScreenRegistry

# ── Handlers ──────────────────────────────────────────────────────────────────
from regbot.handlers.common import router as common_router
from regbot.handlers.event_details import router as event_details_router
from regbot.handlers.registration import router as registration_router
from regbot.handlers.fallback import router as fallback_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def build_dispatcher(functions: SupabaseFunctions, screens: ScreenRegistry) -> Dispatcher:
    dp = Dispatcher(storage=MemoryStorage())
    dp["screens"] = screens

    # ── Global error handler — ensures callbacks are always answered ──────────
    @dp.errors()
    async def handle_error(event: ErrorEvent) -> None:
        logger.exception("Unhandled error: %s", event.exception)
        update = event.update
        if update.callback_query:
            try:
                await update.callback_query.answer(
                    "⚠️ Something went wrong. Please try again.", show_alert=True
                )
            except Exception as exc:
                logger.warning("Could not answer callback after error: %s", exc)

    # ── Global middlewares ────────────────────────────────────────────────────
    dp.update.middleware(ApiMiddleware(functions))

    # ── Routers — order matters for handler priority ──────────────────────────
    dp.include_router(common_router)
    dp.include_router(event_details_router)
    dp.include_router(registration_router)

    # !! Must be last — catches any callback not handled above !!
    dp.include_router(fallback_router)

    return dp


def request_stop(dp: Dispatcher, pending: set[asyncio.Task]) -> asyncio.Task:
    """Schedule `dp.stop_polling()`; `pending` holds the task until it finishes."""
    task = asyncio.get_running_loop().create_task(dp.stop_polling())
    pending.add(task)

    def _done(t: asyncio.Task) -> None:
        pending.discard(t)
        if not t.cancelled() and t.exception() is not None:
            logger.error("Stopping polling failed: %s", t.exception())

    task.add_done_callback(_done)
    return task


async def main() -> None:
    logger.info("Starting event registration bot for event %s…", settings.EVENT_ID)

    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    functions = SupabaseFunctions(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        timeout=settings.HTTP_TIMEOUT,
    )
    screens = ScreenRegistry(settings.EVENT_ID)
    dp = build_dispatcher(functions, screens)

    # ── Graceful shutdown on SIGTERM (Docker) ─────────────────────────────────
    loop = asyncio.get_running_loop()
    stop_tasks: set[asyncio.Task] = set()

    def _handle_signal():
        logger.info("Received shutdown signal, stopping…")
        request_stop(dp, stop_tasks)

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _handle_signal)
        except NotImplementedError:
            # Windows does not support add_signal_handler
            pass

    try:
        logger.info("Bot is running. Press Ctrl+C to stop.")
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types(),
            handle_signals=False,
        )
    finally:
        logger.info("Shutting down…")
        screens.close_all()
        await functions.aclose()
        await bot.session.close()
        logger.info("Shutdown complete.")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
