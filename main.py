#!/usr/bin/env python3
"""
WikiLinkBot - Discord bot linking to the HighSpell Wiki

- /wiki page:<nom> → lien vers la page (ou "not found")
- [[Page]] dans un message → lien vers la page
- Lien vers l'ancien wiki Fandom → lien vers le nouveau wiki
"""

import argparse
import asyncio
import logging
import os
import pathlib
import sys

import discord
import yaml

from core.command_logger import CommandLogger
from core.message_bus import MessageBus
from core.message_handler import MessageHandler
from modules.integrations.mediawiki.client import MediaWikiClient
from transports.discord_client import DiscordClient

# Logger will be configured in setup_logging()
LOGGER = logging.getLogger(__name__)

TOKEN_ENV_VAR = "DISCORD_BOT_TOKEN"


def parse_args(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(description="WikiLinkBot - Discord wiki linker")
    parser.add_argument(
        '--config',
        type=str,
        default='config/config.yaml',
        help='Path to config file (default: config/config.yaml)'
    )
    parser.add_argument(
        '--log-dir',
        type=str,
        default='logs',
        help='Directory for log files (default: logs)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable DEBUG logging'
    )
    return parser.parse_args(argv)


def setup_logging(log_dir='logs', debug=False):
    """
    Setup logging structure

    Structure:
        logs/
        ├── wikilinkbot.log  (main bot logs, startup, errors)
        └── commands.log     (slash command executions)
    """
    logs_base = pathlib.Path(log_dir)
    logs_base.mkdir(parents=True, exist_ok=True)

    log_file = logs_base / "wikilinkbot.log"
    log_paths = {
        'instance': log_file,
        'commands': logs_base / "commands.log"
    }

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler()
        ],
        force=True  # Override any existing config
    )

    # discord.py est très bavard en DEBUG
    logging.getLogger("discord").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return log_file, log_paths


def load_config(config_path='config/config.yaml'):
    """Charge config.yaml"""
    config_file = pathlib.Path(config_path)
    if not config_file.exists():
        LOGGER.error(f"Config file {config_path} not found")
        sys.exit(1)
    with open(config_file, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def resolve_token(config):
    """Token Discord: variable d'environnement prioritaire sur config.yaml"""
    return os.environ.get(TOKEN_ENV_VAR) or (config.get("discord") or {}).get("token")


async def main(argv=None):
    """Main entry point: wiring MessageBus, MediaWiki client, handlers and Discord transport"""
    args = parse_args(argv)
    log_file, log_paths = setup_logging(args.log_dir, args.debug)

    config = load_config(args.config)
    config['_log_paths'] = log_paths

    discord_config = config.get("discord", {}) or {}
    wiki_config = config.get("wiki", {}) or {}
    timeouts = config.get("timeouts", {}) or {}

    token = resolve_token(config)
    if not token:
        LOGGER.error(f"❌ Discord token manquant (discord.token ou ${TOKEN_ENV_VAR})")
        sys.exit(1)

    LOGGER.info(f"📝 Logging to {log_file}")

    bus = MessageBus()
    wiki = MediaWikiClient.from_config(config)
    LOGGER.info(f"🌐 MediaWiki endpoint: {wiki.api_endpoint}")

    MessageHandler(bus, wiki, config)
    CommandLogger(bus, config)

    client = None
    exit_code = 0
    try:
        client = DiscordClient(
            bus,
            guild_id=discord_config.get("guild_id"),
            send_timeout=timeouts.get("discord_send", 5.0),
            wiki_name=wiki_config.get("name", "HighSpell Wiki")
        )
        await client.start(token)
    except discord.LoginFailure as e:
        LOGGER.error(f"❌ Failed to log in to Discord: {e}")
        LOGGER.error("Please ensure your Discord token is correct.")
        exit_code = 1
    except discord.PrivilegedIntentsRequired as e:
        LOGGER.error(f"❌ {e}")
        LOGGER.error("Enable the Message Content intent in the Discord developer portal.")
        exit_code = 1
    except (discord.DiscordException, ValueError) as e:
        LOGGER.error(f"❌ Discord startup failed: {e}", exc_info=True)
        exit_code = 1
    except asyncio.CancelledError:
        LOGGER.info("🛑 Arrêt demandé")
    finally:
        if client is not None and not client.is_closed():
            await client.close()
        await bus.wait_all()
        await wiki.aclose()
        LOGGER.info("👋 WikiLinkBot arrêté")

    if exit_code:
        sys.exit(exit_code)


def run():
    """Console entry point (wikilinkbot)"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
