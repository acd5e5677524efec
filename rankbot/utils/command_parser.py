"""
Parser for the plain-text commands accepted in config channels.

Config channels are private staff channels, so commands are plain messages
rather than slash commands:

    update now
    change nationality of <steamid> to <tag>
    refresh config
    show config
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConfigCommandType(str, Enum):
    UPDATE_NOW = "update_now"
    CHANGE_NATIONALITY = "change_nationality"
    REFRESH_CONFIG = "refresh_config"
    SHOW_CONFIG = "show_config"


@dataclass(frozen=True)
class ConfigCommand:
    type: ConfigCommandType
    steam_id: Optional[str] = None
    nationality: Optional[str] = None


def parse_config_command(content: str) -> Optional[ConfigCommand]:
    """
    Parse a config channel message.

    Args:
        content: Raw message content

    Returns:
        The parsed command, or None if the message is not a command

    Examples:
        "update now" -> UPDATE_NOW
        "change nationality of 7656119 to :flag_se:" -> CHANGE_NATIONALITY
        "change nationality of 7656119" -> None  # Missing "to <tag>"
    """
    content = content.strip()

    if content.startswith('update now'):
        return ConfigCommand(ConfigCommandType.UPDATE_NOW)

    if content.startswith('change nationality of'):
        parts = content.split(' ')
        if len(parts) >= 6 and parts[4] == 'to':
            return ConfigCommand(
                ConfigCommandType.CHANGE_NATIONALITY,
                steam_id=parts[3],
                nationality=' '.join(parts[5:])
            )
        return None

    if content == 'refresh config':
        return ConfigCommand(ConfigCommandType.REFRESH_CONFIG)

    if content == 'show config':
        return ConfigCommand(ConfigCommandType.SHOW_CONFIG)

    return None
