"""Data models."""

from dataclasses import dataclass, field


@dataclass
class RawGroup:
    id: str
    name: str


@dataclass
class RawEvent:
    name: str


@dataclass
class RawAchievement:
    place: str
    compo: str


@dataclass
class RawRelease:
    id: str = ""
    name: str = ""
    release_day: str = ""
    release_month: str = ""
    release_year: str = ""
    screenshot: str = ""
    group: RawGroup | None = None  # <ReleasedBy><Group>
    event: RawEvent | None = None  # <ReleasedAt><Event>
    achievement: RawAchievement | None = None


@dataclass
class RawEntry:
    place: str
    rating: str
    votes: str
    release: RawRelease = field(default_factory=RawRelease)


@dataclass
class ChartPage:
    entries: list[RawEntry]
    has_more: bool


@dataclass
class DisplayRecord:
    id: str
    name: str
    place: str
    release_date: str  # "d/m/y" or "Unknown"
    release_date_sort_value: int  # epoch ms, 0 when unknown
    rating: float
    votes: int
    csdb_url: str
    screenshot: str | None
    achievement: str | None
    event: str | None
