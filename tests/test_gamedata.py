import json

import pytest

from peril.gamedata import (
    ArmyMove,
    Player,
    RecognitionOfWar,
    Unit,
    UnitRank,
    all_locations,
    all_ranks,
)


def _player(name="alice"):
    return Player(
        name,
        {
            1: Unit(1, UnitRank.INFANTRY, "europe"),
            2: Unit(2, UnitRank.ARTILLERY, "asia"),
        },
    )


def test_all_ranks():
    assert {r.value for r in all_ranks()} == {"infantry", "cavalry", "artillery"}


def test_all_locations():
    assert all_locations() == {
        "americas", "europe", "africa", "asia", "australia", "antarctica",
    }


def test_unit_to_dict_field_names():
    assert Unit(3, UnitRank.CAVALRY, "africa").to_dict() == {
        "ID": 3, "Rank": "cavalry", "Location": "africa",
    }


def test_unit_invalid_rank_raises():
    with pytest.raises(ValueError):
        Unit.from_dict({"ID": 1, "Rank": "dragon", "Location": "asia"})


def test_player_round_trip_through_json():
    player = _player()
    encoded = json.dumps(player.to_dict())
    assert Player.from_dict(json.loads(encoded)) == player


def test_player_unit_keys_are_strings_on_the_wire():
    assert set(_player().to_dict()["Units"]) == {"1", "2"}


def test_player_null_units():
    assert Player.from_dict({"Username": "bob", "Units": None}) == Player("bob", {})


def test_army_move_round_trip():
    player = _player()
    move = ArmyMove(player, list(player.units.values()), "asia")
    assert ArmyMove.from_dict(json.loads(json.dumps(move.to_dict()))) == move


def test_recognition_of_war_round_trip():
    war = RecognitionOfWar(_player("alice"), _player("bob"))
    assert RecognitionOfWar.from_dict(json.loads(json.dumps(war.to_dict()))) == war