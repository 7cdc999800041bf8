"""
GroupMe Feature Bot - Main Entry Point

Central bot that:
- Loads configuration from the environment and an optional bot JSON file
- Installs drop-in plugins from plugins/
- Serves the GroupMe callback URL
"""

import sys
import argparse
import logging
from pathlib import Path

from groupme_bot import Bot, ConfigurationError, GroupMeSender, PluginLoader
from groupme_bot.settings import Settings, load_settings

BOT_DIR = Path(__file__).parent

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="GroupMe Feature Bot")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to bot config JSON file (e.g., bots/example_bot.json)"
    )
    return parser.parse_args(argv)


def build_bot(settings: Settings, plugins_dir: Path | None = None) -> Bot:
    """Assemble the bot: built-in features, configured plugins and /help."""
    bot = Bot(sender=GroupMeSender(timeout=settings.send_timeout)).config(settings.bot_id)

    bot.pattern(
        "good bot",
        lambda message, matches: bot.send(f"Thanks, {message.get('name', 'friend')}!")
    )

    loader = PluginLoader(root_dir=plugins_dir, allowed_plugins=settings.plugins)
    loader.install(bot, settings.plugin_args)

    return bot.help()


def main(argv=None):
    """Start the bot."""
    args = parse_args(argv)
    config_path = BOT_DIR / args.config if args.config else None

    try:
        settings = load_settings(config_path, base_dir=BOT_DIR)
        logging.getLogger().setLevel(settings.log_level)
        logger.info(f"Starting GroupMe bot '{settings.name}'...")
        bot = build_bot(settings)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(
        f"Loaded {len(bot.registry)} features and {len(bot.plugins)} plugins"
    )
    bot.listen(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
