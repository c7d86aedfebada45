"""
Pydantic schemas for player records decoded from the rating feed
"""

from pydantic import BaseModel, Field, validator
from typing import Iterator, List

UINT8_MAX = 2**8 - 1
UINT16_MAX = 2**16 - 1
UINT64_MAX = 2**64 - 1

TEXT_FIELDS = (
    "name", "country", "sex",
    "title", "w_title", "o_title", "foa_title",
    "flag",
)

NUMERIC_FIELDS = (
    "rating", "games", "k",
    "rapid_rating", "rapid_games", "rapid_k",
    "blitz_rating", "blitz_games", "blitz_k",
    "birthday",
)


class PlayerRecord(BaseModel):
    """
    One player as published in the federation feed.

    Ensures:
    - fideid is present and fits an unsigned 64-bit integer
    - Missing text fields become empty strings
    - Missing numeric fields become zero
    - K-factors fit a byte, birthday fits 16 bits
    """

    fideid: int = Field(..., ge=0, le=UINT64_MAX)

    # Basic info
    name: str = ""
    country: str = ""
    sex: str = ""

    # Titles
    title: str = ""
    w_title: str = ""
    o_title: str = ""
    foa_title: str = ""

    # Standard rating
    rating: int = Field(0, ge=0)
    games: int = Field(0, ge=0)
    k: int = Field(0, ge=0, le=UINT8_MAX)

    # Rapid rating
    rapid_rating: int = Field(0, ge=0)
    rapid_games: int = Field(0, ge=0)
    rapid_k: int = Field(0, ge=0, le=UINT8_MAX)

    # Blitz rating
    blitz_rating: int = Field(0, ge=0)
    blitz_games: int = Field(0, ge=0)
    blitz_k: int = Field(0, ge=0, le=UINT8_MAX)

    # Extra info
    birthday: int = Field(0, ge=0, le=UINT16_MAX)
    flag: str = ""

    @validator(*TEXT_FIELDS, pre=True)
    def empty_text(cls, v):
        """Absent text nodes decode to an empty string"""
        if v is None:
            return ""
        return v

    @validator(*NUMERIC_FIELDS, pre=True)
    def empty_number(cls, v):
        """Absent or blank numeric nodes decode to zero"""
        if v is None:
            return 0
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return 0
        return v

    @validator("fideid", pre=True)
    def strip_fideid(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "fideid": 1503014,
                "name": "Carlsen, Magnus",
                "country": "NOR",
                "sex": "M",
                "title": "GM",
                "w_title": "",
                "o_title": "",
                "foa_title": "",
                "rating": 2830,
                "games": 0,
                "k": 10,
                "rapid_rating": 2823,
                "rapid_games": 0,
                "rapid_k": 10,
                "blitz_rating": 2886,
                "blitz_games": 0,
                "blitz_k": 10,
                "birthday": 1990,
                "flag": ""
            }
        }


class PlayerFeedDocument(BaseModel):
    """One feed snapshot: the players in feed order"""
    players: List[PlayerRecord] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.players)

    def __iter__(self) -> Iterator[PlayerRecord]:
        return iter(self.players)
