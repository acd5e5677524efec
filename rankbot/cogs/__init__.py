"""Discord cogs loaded as extensions by RankBot."""
