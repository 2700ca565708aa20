from typing import Any, Dict, List, Literal, Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field, model_validator, field_validator, ConfigDict

TeamId = Literal["teamA", "teamB"]
Side = Literal["left", "right"]
ImportantPointType = Literal["MATCH POINT", "SET POINT", "GAME POINT", "TIEBREAK POINT"]


class PlayerIn(BaseModel):
    id: Optional[str] = Field(default=None, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        """Allow players to be given as a bare name."""
        if isinstance(value, str):
            return {"name": value}
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not isinstance(value, str):
            raise TypeError("name must be a string")
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("name must not be empty")
        return trimmed


class SettingsIn(BaseModel):
    """Match rules as submitted; anything omitted falls back to the defaults."""

    sets: Optional[Union[Literal[1, 2, 3, 5], Literal["super"]]] = None
    scoringSystem: Optional[Literal["classic", "no-ad", "fast4"]] = None
    tiebreakEnabled: Optional[bool] = None
    tiebreakType: Optional[Literal["regular", "championship"]] = None
    tiebreakAt: Optional[Literal["4-4", "5-5", "6-6"]] = None
    finalSetTiebreak: Optional[bool] = None
    finalSetTiebreakLength: Optional[Literal[7, 10]] = None
    goldenGame: Optional[bool] = None
    goldenPoint: Optional[bool] = None
    windbreak: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


class MatchCreate(BaseModel):
    type: Literal["tennis", "padel"] = "tennis"
    format: Optional[Literal["singles", "doubles"]] = None
    teamA: List[PlayerIn] = Field(..., min_length=1, max_length=2)
    teamB: List[PlayerIn] = Field(..., min_length=1, max_length=2)
    settings: Optional[SettingsIn] = None
    server: TeamId = "teamA"
    teamASide: Side = "left"
    courtNumber: Optional[int] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _infer_format(self) -> "MatchCreate":
        if self.format is None:
            self.format = "doubles" if len(self.teamA) > 1 else "singles"
        return self


class TeamIn(BaseModel):
    team: TeamId


class CompleteIn(BaseModel):
    winner: Optional[TeamId] = None


class MatchIdOut(BaseModel):
    """Schema returned after creating a match."""

    id: str
    code: str


class PlayerOut(BaseModel):
    id: str
    name: str


class TeamOut(BaseModel):
    players: List[PlayerOut] = Field(default_factory=list)


class ServerOut(BaseModel):
    team: TeamId
    playerIndex: int = 0


class MatchOut(BaseModel):
    """Full match snapshot as stored."""

    id: str
    code: Optional[str] = None
    type: str
    format: str
    createdAt: Optional[str] = None
    settings: Dict[str, Any]
    teamA: TeamOut
    teamB: TeamOut
    score: Dict[str, Any]
    currentServer: ServerOut
    courtSides: Dict[str, Side]
    shouldChangeSides: bool = False
    isCompleted: bool = False
    winner: Optional[TeamId] = None
    courtNumber: Optional[int] = None


class ImportantPointOut(BaseModel):
    type: Optional[ImportantPointType] = None
    team: Optional[TeamId] = None


class ScoreSummaryOut(BaseModel):
    """Compact score used in listings and stream messages."""

    sets: Dict[str, int]
    games: Dict[str, int]
    points: Dict[str, Union[int, str]]
    setScores: List[Dict[str, Optional[int]]] = Field(default_factory=list)
    isTiebreak: bool = False
    isCompleted: bool = False
    winner: Optional[TeamId] = None


class MatchSummaryOut(BaseModel):
    """Lightweight representation of a match used in listings."""

    id: str
    code: str
    type: str
    format: str
    courtNumber: Optional[int] = None
    teamA: List[str] = Field(default_factory=list)
    teamB: List[str] = Field(default_factory=list)
    isCompleted: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    summary: Optional[ScoreSummaryOut] = None


class CourtOut(BaseModel):
    number: int
    occupied: bool
    matchId: Optional[str] = None
    code: Optional[str] = None
