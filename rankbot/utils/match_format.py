"""
Formatting for match results pushed by the rating backend.
"""

from typing import Any, Dict, List

from rankbot.constants import DiscordLimits, UIConstants
from rankbot.data_models.standings import ThresholdConfig

TEAMS = ("1", "2")
TABLE_HEADER = "Player           | Before | After | Change | K  | Games \n"
TABLE_RULE = "-----------------|--------|-------|--------|----|---------\n"


def _format_player_row(player: Dict[str, Any]) -> str:
    if not isinstance(player, dict):
        raise ValueError(f"Invalid player entry: {player!r}")
    name = str(player.get('name', '?')).ljust(16)[:16]
    old_rating = str(player.get('old_rating', '?')).ljust(7)
    new_rating = str(player.get('new_rating', '?')).ljust(6)
    delta = player.get('delta', 0)
    delta_text = (f"+{delta}" if isinstance(delta, (int, float)) and delta > 0 else str(delta)).ljust(7)
    k_value = str(player.get('k_value') or "32").ljust(3)
    games = str(player.get('pastgames') or "?")
    return f"{name} | {old_rating}| {new_rating}| {delta_text}| {k_value}| {games}\n"


def _format_team_table(team: str, rows: List[str], hidden: int = 0) -> str:
    text = f"### Team {team} Players\n"
    if not rows and not hidden:
        return text + "No players\n"
    text += "```\n" + TABLE_HEADER + TABLE_RULE + "".join(rows)
    if hidden:
        text += f"... and {hidden} more\n"
    return text + "```\n"


def format_k_value_legend(thresholds: ThresholdConfig) -> str:
    k = thresholds.tier_k_values
    return (
        "\n**About K-Values:**\n"
        f"• K={k['tier1']}: New players (<{thresholds.min_games_for_rank} games)\n"
        f"• K={k['tier2']}: Developing players "
        f"({thresholds.min_games_for_rank}-{thresholds.min_games_for_tier2} games)\n"
        f"• K={k['tier3']}: Established players ({thresholds.min_games_for_tier2}+ games)\n"
        "\nHigher K-values cause larger rating changes."
    )


def format_match_results(
    match_data: Dict[str, Any],
    thresholds: ThresholdConfig,
    max_length: int = DiscordLimits.MESSAGE_LIMIT
) -> str:
    """
    Render a match result payload as a Discord message.

    Player rows are dropped from the bottom of the longest team table until
    the message fits in `max_length`; each table notes how many were left out.

    Raises:
        ValueError: If the payload has no teams or is not shaped like a match result
    """
    if not isinstance(match_data, dict) or not match_data.get('teams'):
        raise ValueError("Invalid match data: no teams")

    teams = match_data['teams']
    ratings = match_data.get('team_ratings') or {}
    outcomes = match_data.get('expected_outcomes') or {}
    if not isinstance(teams, dict) or not isinstance(ratings, dict) or not isinstance(outcomes, dict):
        raise ValueError("Invalid match data: teams, team_ratings and expected_outcomes must be objects")

    team_rows: Dict[str, List[str]] = {}
    for team in TEAMS:
        players = teams.get(team) or []
        if not isinstance(players, list):
            raise ValueError(f"Invalid match data: team {team} is not a list")
        team_rows[team] = [_format_player_row(p) for p in players]

    timestamp = f"<t:{match_data['timestamp']}:F>" if match_data.get('timestamp') else "Unknown time"

    def win_chance(team: str) -> str:
        try:
            return f"{float(outcomes[team]) * 100:.1f}"
        except (KeyError, TypeError, ValueError):
            return "?"

    header = f"# Match Results ({timestamp})\n\n"
    header += f"## {UIConstants.TROPHY_EMOJI} **Team {match_data.get('winning_team', '?')} Victory**\n\n"
    for team in TEAMS:
        header += f"**Team {team}** (Rating: {ratings.get(team, '?')}, Win Chance: {win_chance(team)}%)\n"
    header += "\n"
    legend = format_k_value_legend(thresholds)

    hidden = {team: 0 for team in TEAMS}

    def compose() -> str:
        tables = "".join(_format_team_table(team, team_rows[team], hidden[team]) for team in TEAMS)
        return header + tables + legend

    text = compose()
    while len(text) > max_length and any(team_rows.values()):
        team = max(TEAMS, key=lambda t: len(team_rows[t]))
        team_rows[team].pop()
        hidden[team] += 1
        text = compose()
    return text
