"""A client's view of the game and the commands and events that change it."""

from __future__ import annotations

import re
import threading
from dataclasses import replace
from enum import IntEnum
from typing import Iterable, Sequence

from peril.gamedata import (
    ArmyMove,
    Player,
    RecognitionOfWar,
    Unit,
    UnitRank,
    all_locations,
    all_ranks,
)
from peril.routing import PlayingState

_SEPARATOR = "------------------------"
_INTEGER = re.compile(r"[+-]?[0-9]+")

_POWER = {UnitRank.ARTILLERY: 10, UnitRank.CAVALRY: 5, UnitRank.INFANTRY: 1}


class GameError(Exception):
    """A command could not be carried out."""


class MoveOutcome(IntEnum):
    SAME_PLAYER = 0
    SAFE = 1
    MAKE_WAR = 2


class WarOutcome(IntEnum):
    NOT_INVOLVED = 0
    NO_UNITS = 1
    YOU_WON = 2
    OPPONENT_WON = 3
    DRAW = 4


def units_to_power_level(units: Iterable[Unit]) -> int:
    """Total fighting strength of the given units."""
    return sum(_POWER.get(unit.rank, 0) for unit in units)


def _overlapping_location(p1: Player, p2: Player) -> str:
    theirs = {u.location for u in p2.units.values()}
    return next((u.location for u in p1.units.values() if u.location in theirs), "")


class GameState:
    """The local player's units and whether the game is paused; thread-safe."""

    def __init__(self, username: str) -> None:
        self._player = Player(username, {})
        self._paused = False
        self._lock = threading.RLock()

    @property
    def username(self) -> str:
        return self._player.username

    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    def _set_paused(self, paused: bool) -> None:
        with self._lock:
            self._paused = paused

    def update_unit(self, unit: Unit) -> None:
        with self._lock:
            self._player.units[unit.id] = unit

    def get_unit(self, unit_id: int) -> Unit | None:
        with self._lock:
            return self._player.units.get(unit_id)

    def get_player_snap(self) -> Player:
        with self._lock:
            return Player(self._player.username, dict(self._player.units))

    def _remove_units_in_location(self, location: str) -> None:
        with self._lock:
            self._player.units = {
                uid: u for uid, u in self._player.units.items() if u.location != location
            }

    def command_status(self) -> None:
        if self.is_paused():
            print("The game is paused.")
            return
        print("The game is not paused.")
        player = self.get_player_snap()
        print(f"You are {player.username}, and you have {len(player.units)} units.")
        for unit in player.units.values():
            print(f"* {unit.id}: {unit.location}, {unit.rank.value}")

    def command_spawn(self, words: Sequence[str]) -> Unit:
        if len(words) < 3:
            raise GameError("usage: spawn <location> <rank>")
        location, rank_name = words[1], words[2]
        if location not in all_locations():
            raise GameError(f"error: {location} is not a valid location")
        if rank_name not in {r.value for r in all_ranks()}:
            raise GameError(f"error: {rank_name} is not a valid unit")
        with self._lock:
            unit = Unit(len(self._player.units) + 1, UnitRank(rank_name), location)
            self._player.units[unit.id] = unit
        print(f"Spawned a(n) {rank_name} in {location} with id {unit.id}")
        return unit

    def command_move(self, words: Sequence[str]) -> ArmyMove:
        if self.is_paused():
            raise GameError("the game is paused, you can not move units")
        if len(words) < 3:
            raise GameError("usage: move <location> <unitID> <unitID> <unitID> etc")
        location = words[1]
        if location not in all_locations():
            raise GameError(f"error: {location} is not a valid location")
        unit_ids = []
        for word in words[2:]:
            if not _INTEGER.fullmatch(word):
                raise GameError(f"error: {word} is not a valid unit ID")
            unit_ids.append(int(word))

        moved = []
        for unit_id in unit_ids:
            unit = self.get_unit(unit_id)
            if unit is None:
                raise GameError(f"error: unit with ID {unit_id} not found")
            unit = replace(unit, location=location)
            self.update_unit(unit)
            moved.append(unit)

        move = ArmyMove(self.get_player_snap(), moved, location)
        print(f"Moved {len(move.units)} units to {move.to_location}")
        return move

    def handle_move(self, move: ArmyMove) -> MoveOutcome:
        try:
            player = self.get_player_snap()
            print()
            print("==== Move Detected ====")
            print(
                f"{move.player.username} is moving {len(move.units)} unit(s) "
                f"to {move.to_location}"
            )
            for unit in move.units:
                print(f"* {unit.rank.value}")
            if player.username == move.player.username:
                return MoveOutcome.SAME_PLAYER
            overlap = _overlapping_location(player, move.player)
            if overlap:
                print(
                    f"You have units in {overlap}! "
                    f"You are at war with {move.player.username}!"
                )
                return MoveOutcome.MAKE_WAR
            print(f"You are safe from {move.player.username}'s units.")
            return MoveOutcome.SAFE
        finally:
            print(_SEPARATOR)

    def handle_pause(self, state: PlayingState) -> None:
        try:
            print()
            if state.is_paused:
                print("==== Pause Detected ====")
            else:
                print("==== Resume Detected ====")
            self._set_paused(state.is_paused)
        finally:
            print(_SEPARATOR)

    def handle_war(self, recognition: RecognitionOfWar) -> tuple[WarOutcome, str, str]:
        """Fight a declared war; returns the outcome, the winner and the loser."""
        try:
            return self._fight(recognition)
        finally:
            print(_SEPARATOR)

    def _fight(self, rw: RecognitionOfWar) -> tuple[WarOutcome, str, str]:
        attacker, defender = rw.attacker, rw.defender
        print()
        print("==== War Declared ====")
        print(f"{attacker.username} has declared war on {defender.username}!")

        player = self.get_player_snap()
        if player.username == defender.username:
            print(f"{player.username}, you published the war.")
            return WarOutcome.NOT_INVOLVED, "", ""
        if player.username != attacker.username:
            print(f"{player.username}, you are not involved in this war.")
            return WarOutcome.NOT_INVOLVED, "", ""

        overlap = _overlapping_location(attacker, defender)
        if not overlap:
            print("Error! No units are in the same location. No war will be fought.")
            return WarOutcome.NO_UNITS, "", ""

        attacker_units = [u for u in attacker.units.values() if u.location == overlap]
        defender_units = [u for u in defender.units.values() if u.location == overlap]
        for side, units in ((attacker, attacker_units), (defender, defender_units)):
            print(f"{side.username}'s units:")
            for unit in units:
                print(f"  * {unit.rank.value}")

        attacker_power = units_to_power_level(attacker_units)
        defender_power = units_to_power_level(defender_units)
        print(f"Attacker has a power level of {attacker_power}")
        print(f"Defender has a power level of {defender_power}")

        if attacker_power != defender_power:
            winner, loser = (
                (attacker, defender) if attacker_power > defender_power else (defender, attacker)
            )
            print(f"{winner.username} has won the war!")
            if player.username == loser.username:
                print("You have lost the war!")
                self._remove_units_in_location(overlap)
                print(f"Your units in {overlap} have been killed.")
                return WarOutcome.OPPONENT_WON, winner.username, loser.username
            return WarOutcome.YOU_WON, winner.username, loser.username

        print("The war ended in a draw!")
        print(f"Your units in {overlap} have been killed.")
        self._remove_units_in_location(overlap)
        return WarOutcome.DRAW, attacker.username, defender.username