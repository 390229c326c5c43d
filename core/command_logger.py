#!/usr/bin/env python3
"""
Command Logger
Logs all command executions to dedicated commands.log file
"""

import logging

from core.message_bus import MessageBus

LOGGER = logging.getLogger(__name__)


class CommandLogger:
    """
    Logs all slash command executions with user, args, and results
    Separate from the main log for audit
    """

    def __init__(self, bus: MessageBus, config: dict):
        """
        Args:
            bus: MessageBus to subscribe
            config: Config dict with _log_paths
        """
        self.bus = bus
        self.command_count = 0

        log_paths = config.get('_log_paths', {})
        cmd_log_file = log_paths.get('commands')

        if cmd_log_file:
            self.cmd_file_logger = logging.getLogger('command_executions')
            self.cmd_file_logger.setLevel(logging.INFO)
            self.cmd_file_logger.propagate = False  # Don't send to root logger

            handler = logging.FileHandler(cmd_log_file, encoding='utf-8')
            handler.setFormatter(logging.Formatter('%(asctime)s %(message)s'))
            self.cmd_file_logger.addHandler(handler)

            LOGGER.info(f"⚡ Command logging to: {cmd_log_file}")
        else:
            self.cmd_file_logger = LOGGER
            LOGGER.info("⚡ Command logging to main log (no dedicated file)")

        self.bus.subscribe("command.executed", self._handle_command_executed)
        LOGGER.info("CommandLogger initialized - listening to command events")

    async def _handle_command_executed(self, data: dict) -> None:
        """
        Handler for command executions

        Args:
            data: Dict with command, user, channel, args, result
        """
        self.command_count += 1

        command = data.get('command', 'unknown')
        user = data.get('user', 'anonymous')
        channel = data.get('channel', 'unknown')
        args = data.get('args') or '(no args)'
        result = data.get('result', 'success')

        self.cmd_file_logger.info(
            f"✅ [#{channel}] {user} → /{command} {args} | {result}"
        )

    def get_command_count(self) -> int:
        """Returns number of commands logged"""
        return self.command_count
