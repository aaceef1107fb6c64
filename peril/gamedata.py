"""Players, units and the messages that describe their movements."""

from dataclasses import dataclass, field
from enum import Enum


class UnitRank(str, Enum):
    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"

    def __str__(self):
        return self.value


_LOCATIONS = frozenset({"americas", "europe", "africa", "asia", "australia", "antarctica"})


def all_ranks():
    return frozenset(UnitRank)


def all_locations():
    return _LOCATIONS


@dataclass(frozen=True)
class Unit:
    id: int
    rank: UnitRank
    location: str

    def to_dict(self):
        return {"ID": self.id, "Rank": self.rank.value, "Location": self.location}

    @classmethod
    def from_dict(cls, data):
        return cls(int(data["ID"]), UnitRank(data["Rank"]), str(data["Location"]))


@dataclass
class Player:
    username: str
    units: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            "Username": self.username,
            "Units": {str(uid): u.to_dict() for uid, u in self.units.items()},
        }

    @classmethod
    def from_dict(cls, data):
        units = data.get("Units") or {}
        return cls(
            str(data.get("Username", "")),
            {int(uid): Unit.from_dict(u) for uid, u in units.items()},
        )


@dataclass
class ArmyMove:
    player: Player
    units: list
    to_location: str

    def to_dict(self):
        return {
            "Player": self.player.to_dict(),
            "Units": [u.to_dict() for u in self.units],
            "ToLocation": self.to_location,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            Player.from_dict(data.get("Player") or {}),
            [Unit.from_dict(u) for u in data.get("Units") or []],
            str(data.get("ToLocation", "")),
        )


@dataclass
class RecognitionOfWar:
    attacker: Player
    defender: Player

    def to_dict(self):
        return {"Attacker": self.attacker.to_dict(), "Defender": self.defender.to_dict()}

    @classmethod
    def from_dict(cls, data):
        return cls(
            Player.from_dict(data.get("Attacker") or {}),
            Player.from_dict(data.get("Defender") or {}),
        )