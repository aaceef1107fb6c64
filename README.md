# peril

`peril` is a library for Peril, a multiplayer war game. Its players talk
to each other through a RabbitMQ broker. The library has these parts:

- `peril.gamedata`: players, units and the messages that describe them.
- `peril.gamestate`: one player's view of the game, with the commands and
  events that change it.
- `peril.console`: terminal prompts and help texts.
- `peril.logs`: appends game logs to a file.
- `peril.gob`: encodes and decodes game logs in the gob format.
- `peril.pubsub`: publishes and subscribes over AMQP with `pika`.
- `peril.routing`: exchange names, routing keys, `PlayingState` and
  `GameLog`.

## Game rules

There are three unit ranks in `UnitRank`: `infantry`, `cavalry` and
`artillery`. They are worth 1, 5 and 10 power. `units_to_power_level`
adds up the power of a group of units.

There are six locations, listed by `all_locations()`: `americas`,
`europe`, `africa`, `asia`, `australia` and `antarctica`.

When a move brings a player's army to a place where you also have units,
`handle_move` reports `MoveOutcome.MAKE_WAR`. Both sides then compare
their units at the first location they share. The side with more power
wins. The loser's units at that location are removed. In a draw, the
local player's units there are removed.

## The game state

`GameState` holds the local player's units and the paused flag. It is
safe to use from several threads.

```python
from peril.gamestate import GameState, GameError

state = GameState("alice")
state.command_spawn(["spawn", "europe", "infantry"])   # returns the new Unit
state.command_spawn(["spawn", "europe", "artillery"])

move = state.command_move(["move", "asia", "1", "2"])   # returns an ArmyMove
state.command_status()                                   # prints the units

try:
    state.command_spawn(["spawn", "mars", "infantry"])
except GameError as err:
    print(err)   # error: mars is not a valid location
```

Commands raise `GameError` in these cases:

- the command has too few words;
- a location or rank is unknown;
- a unit ID is not an integer or does not exist;
- you try to move while the game is paused.

A spawned unit gets the ID one more than the number of units you hold.

Events from other players are handled by these methods:

- `handle_move(move)` returns a `MoveOutcome`: `SAME_PLAYER`, `SAFE` or
  `MAKE_WAR`.
- `handle_pause(playing_state)` pauses or resumes the game.
- `handle_war(recognition)` returns a tuple `(WarOutcome, winner, loser)`.
  The outcome is one of `NOT_INVOLVED`, `NO_UNITS`, `YOU_WON`,
  `OPPONENT_WON` or `DRAW`.

These methods also print a report of the event to standard output.

Other members of `GameState`:

- `username`
- `is_paused()`
- `get_unit(unit_id)`, which returns `None` when there is no such unit
- `update_unit(unit)`
- `get_player_snap()`, which returns a copy of the `Player`

## Messages as JSON

`Unit`, `Player`, `ArmyMove`, `RecognitionOfWar` and `PlayingState` each
have `to_dict()` and a `from_dict(data)` class method. The dictionaries
use the field names `ID`, `Rank`, `Location`, `Username`, `Units`,
`Player`, `ToLocation`, `Attacker`, `Defender` and `IsPaused`.

## Console helpers

`peril.console` provides:

- `print_client_help()` and `print_server_help()`, which print the
  command lists.
- `get_input()`, which shows a `> ` prompt and returns one line from
  standard input, split into words.
- `client_welcome()`, which asks for a username and raises `GameError` if
  none is given.
- `get_malicious_log()`, which returns a random quotation.
- `print_quit()`.

## Game logs

A `GameLog` has a `current_time`, a `message` and a `username`.

- `peril.logs.format_log_line(gamelog)` builds the line
  `<RFC 3339 time> <username>: <message>`. A naive time is read as local
  time.
- `peril.logs.write_log(gamelog, path="game.log")` waits one second on
  purpose, then appends that line to the file.

`peril.gob.encode_game_log(gamelog)` produces a complete gob stream, with
the type definitions first. `peril.gob.decode_game_log(data)` reads the
first game log from such a stream. Data that is malformed or does not
match raises `GobError`.

## Messaging

`peril.pubsub` works on `pika` connections and channels:

- `publish_json(channel, exchange, key, value)` sends `value` as
  `application/json`. If the value has a `to_dict()` method, the result of
  that method is sent.
- `publish_gob(channel, exchange, key, gamelog)` sends a game log as
  `application/gob`.
- `declare_and_bind(connection, exchange, queue_name, key, queue_type)`
  opens a channel, declares the queue and binds it. It returns
  `(channel, queue_name)`.
  - `QueueType.DURABLE` declares a durable queue.
  - `QueueType.TRANSIENT` declares an exclusive, auto-deleting queue.
  - Every queue names `peril_dlx` as its dead-letter exchange.
- `subscribe_json(...)` and `subscribe_gob(...)` declare and bind the
  queue and set a prefetch count of 10. They then register a consumer and
  return `(channel, queue_name)`. Each decoded message goes to your
  handler.
  - `subscribe_json` accepts an optional `decoder`, such as
    `ArmyMove.from_dict`, to turn the parsed JSON into an object.
  - `subscribe_gob` decodes with `decode_game_log` unless you pass another
    `unmarshaller`.
  - The handler returns an `AckType`: `ACK`, `NACK_REQUEUE` or
    `NACK_DISCARD`.
  - A message that cannot be decoded is logged and left unacknowledged.

Messages arrive only while you run the channel's consumer loop yourself,
for example with `channel.start_consuming()`.

## What this package does not do

The package has no client or server program and no command-line entry
point. It does not read commands in a loop, connect to the broker or
declare the exchanges. An application built on it must do those things
with the pieces above.