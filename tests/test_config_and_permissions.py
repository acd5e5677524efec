# tests/test_config_and_permissions.py

"""Tests for channel routing config, admin role checks and rank lookup helpers."""

from types import SimpleNamespace

import pytest

from rankbot.cogs.admin import member_has_admin_role
from rankbot.config import Config, parse_id_list
from rankbot.constants import UIConstants
from rankbot.data_models.standings import UNRANKED
from rankbot.utils.embeds import format_display_rank, format_rank_text, get_rank_color
from rankbot.utils.error_embeds import ErrorEmbeds
from rankbot.utils.exceptions import AdminAuthorizationError

from tests.conftest import make_standing


def test_parse_id_list():
    assert parse_id_list("") == []
    assert parse_id_list("123, 456,,789 ") == [123, 456, 789]


def test_parse_id_list_rejects_garbage():
    with pytest.raises(ValueError):
        parse_id_list("123,abc")


def test_validate_requires_ranks_channel(monkeypatch):
    monkeypatch.setattr(Config, "DISCORD_TOKEN", "token")
    monkeypatch.setattr(Config, "RANKS_CHANNEL_IDS", "")

    with pytest.raises(ValueError):
        Config.validate()

    monkeypatch.setattr(Config, "RANKS_CHANNEL_IDS", "111")
    Config.validate()


def test_member_has_admin_role(monkeypatch):
    monkeypatch.setattr(Config, "ADMIN_ROLE_ID", 42)
    admin = SimpleNamespace(roles=[SimpleNamespace(id=1), SimpleNamespace(id=42)])
    regular = SimpleNamespace(roles=[SimpleNamespace(id=1)])
    # Users outside a guild carry no roles at all
    dm_user = SimpleNamespace()

    assert member_has_admin_role(admin)
    assert not member_has_admin_role(regular)
    assert not member_has_admin_role(dm_user)


@pytest.mark.parametrize("rank, color", [
    (1, UIConstants.GOLD_RANK_COLOR),
    (3, UIConstants.GOLD_RANK_COLOR),
    (4, UIConstants.SILVER_RANK_COLOR),
    (10, UIConstants.SILVER_RANK_COLOR),
    (20, UIConstants.BRONZE_RANK_COLOR),
    (21, UIConstants.DEFAULT_RANK_COLOR),
])
def test_rank_color(rank, color):
    assert get_rank_color(rank) == color


def test_rank_text_for_ranked_and_unranked_players():
    ranked = make_standing("1", "Alpha", 2300, display_rank=4)
    unranked = make_standing("2", "Bravo", 2200, games_played=2, display_rank=UNRANKED)

    assert format_display_rank(ranked) == "#4"
    assert format_display_rank(unranked) == "Unranked"
    assert format_rank_text(ranked) == "Alpha is ranked #4 with 2300 ELO."
    assert "unranked" in format_rank_text(unranked)


def test_permission_denied_embed_uses_admin_message():
    error = AdminAuthorizationError()

    embed = ErrorEmbeds.permission_denied(error.user_message)

    assert embed.title == "Permission Denied"
    assert embed.description == error.user_message
    assert ErrorEmbeds.permission_denied().description == "You don't have permission to perform this action."
