from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class GameEntry(BaseModel):
    """
    One tracked executable.

    Field aliases are the keys used in the store file, so a catalog written by
    an earlier version loads unchanged.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    name: str
    path: str
    time: int = 0
    running: bool = False
    added_date: datetime = Field(alias="addedDate")
    last_played_date: Optional[datetime] = Field(default=None, alias="lastPlayedDate")

    custom_name: Optional[str] = Field(default=None, alias="customName")
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")
    controller_remap: bool = Field(default=False, alias="DS4Windows")

    # Filled in by the metadata lookup, stored as handed over
    description: Optional[str] = None
    screenshots: List[str] = Field(default_factory=list)
    genre_names: List[str] = Field(default_factory=list)
    release_date: Optional[int] = Field(default=None, alias="releaseDate")

    @property
    def display_name(self) -> str:
        return self.custom_name or self.name

    def to_store_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EntryPatch(BaseModel):
    """User edits merged into an entry. Only explicitly set fields are applied."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    custom_name: Optional[str] = Field(default=None, alias="customName")
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")
    controller_remap: Optional[bool] = Field(default=None, alias="DS4Windows")
    description: Optional[str] = None
    screenshots: Optional[List[str]] = None
    genre_names: Optional[List[str]] = None
    release_date: Optional[int] = Field(default=None, alias="releaseDate")


@dataclass(frozen=True)
class TimeDelta:
    entry_id: int
    name: str
    seconds: int
    started: bool = False
    stopped: bool = False


ChangeKind = Literal["TICK", "ADDED", "REMOVED", "EDITED", "LOADED"]


@dataclass(frozen=True)
class CatalogChange:
    kind: ChangeKind
    entry_ids: tuple[int, ...]
    revision: int
