from sqlalchemy import Column, Integer, String, BigInteger
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class RankingRecord(Base):
    """
    One rating snapshot row written by the rating backend.

    Rows are append-only: every rating change or profile edit inserts a new row,
    and the current standing of a player is the row with the newest timestamp.
    """
    __tablename__ = 'rankings'

    steam_id = Column('steamid', String(32), primary_key=True)
    timestamp = Column(BigInteger, primary_key=True)  # Unix seconds
    name = Column(String(100), nullable=False)
    rating = Column('elo', Integer, nullable=False)
    nationality = Column(String(64), nullable=True)
    games_played = Column('pastgames', Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<RankingRecord(steam_id='{self.steam_id}', name='{self.name}', rating={self.rating})>"
