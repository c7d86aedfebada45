from sqlalchemy import Column, BigInteger, Integer, SmallInteger, String
from models.base import Base


class Player(Base):
    """
    One federation-rated player, as served by the lookup API.

    The table is fully replaced by every ingestion run, so it always mirrors
    the most recent feed snapshot. Column names match the feed tags.

    Field Groups:
    - fideid -> stable identifier, primary key
    - name, country, sex -> basic info
    - title, w_title, o_title, foa_title -> title abbreviations
    - rating, games, k -> standard (classical) rating
    - rapid_rating, rapid_games, rapid_k -> rapid rating
    - blitz_rating, blitz_games, blitz_k -> blitz rating
    - birthday, flag -> birth year and activity flag
    """
    __tablename__ = "player"

    fideid = Column(BigInteger, primary_key=True, autoincrement=False, nullable=False)

    # Basic info
    name = Column(String)
    country = Column(String)
    sex = Column(String)

    # Titles
    title = Column(String)
    w_title = Column(String)
    o_title = Column(String)
    foa_title = Column(String)

    # Standard rating and K
    rating = Column(Integer)
    games = Column(Integer)
    k = Column(SmallInteger)

    # Rapid rating and K
    rapid_rating = Column(Integer)
    rapid_games = Column(Integer)
    rapid_k = Column(SmallInteger)

    # Blitz rating and K
    blitz_rating = Column(Integer)
    blitz_games = Column(Integer)
    blitz_k = Column(SmallInteger)

    # Extra info
    birthday = Column(Integer)
    flag = Column(String)


# Signed 64-bit BIGINT ceiling shared by SQLite and PostgreSQL
MAX_STORED_FIDEID = 2**63 - 1

# Insert/select column order
PLAYER_COLUMNS = [column.name for column in Player.__table__.columns]
PLAYER_DATA_COLUMNS = [name for name in PLAYER_COLUMNS if name != "fideid"]
