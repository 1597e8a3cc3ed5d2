import asyncio
import logging

from stay_calendar.core.logging import setup_logging
from stay_calendar.telegram.bot import create_bot, create_dispatcher

setup_logging()
logger = logging.getLogger(__name__)


async def main() -> None:
    bot = create_bot()
    dp = create_dispatcher()

    logger.info("Starting availability calendar bot")
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
        logger.info("Bot stopped")


if __name__ == "__main__":
    asyncio.run(main())
