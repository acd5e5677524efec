# tests/test_command_parser.py

"""Tests for config channel command parsing."""

import pytest

from rankbot.utils.command_parser import ConfigCommandType, parse_config_command


def test_update_now():
    command = parse_config_command("update now")
    assert command.type == ConfigCommandType.UPDATE_NOW


def test_change_nationality():
    command = parse_config_command("change nationality of 76561198000000001 to :flag_se:")

    assert command.type == ConfigCommandType.CHANGE_NATIONALITY
    assert command.steam_id == "76561198000000001"
    assert command.nationality == ":flag_se:"


def test_change_nationality_to_null():
    command = parse_config_command("change nationality of 76561198000000001 to null")
    assert command.nationality == "null"


@pytest.mark.parametrize("content", [
    "change nationality of 76561198000000001",
    "change nationality of 76561198000000001 as :flag_se:",
])
def test_malformed_change_nationality(content):
    assert parse_config_command(content) is None


@pytest.mark.parametrize("content, expected", [
    ("refresh config", ConfigCommandType.REFRESH_CONFIG),
    ("  show config  ", ConfigCommandType.SHOW_CONFIG),
])
def test_config_commands(content, expected):
    assert parse_config_command(content).type == expected


@pytest.mark.parametrize("content", ["", "hello", "please update now", "Update Now"])
def test_ordinary_messages_are_not_commands(content):
    assert parse_config_command(content) is None
