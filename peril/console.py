"""Terminal prompts and messages shared by the server and the client."""

import random
import sys

from peril.gamestate import GameError

MALICIOUS_LOGS = (
    "Never interrupt your enemy when he is making a mistake.",
    "The hardest thing of all for a soldier is to retreat.",
    "A soldier will fight long and hard for a bit of colored ribbon.",
    "It is well that war is so terrible, otherwise we should grow too fond of it.",
    "The art of war is simple enough. Find out where your enemy is. Get at him as "
    "soon as you can. Strike him as hard as you can, and keep moving on.",
    "All warfare is based on deception.",
)

_CLIENT_HELP = """Possible commands:
* move <location> <unitID> <unitID> <unitID>...
    example:
    move asia 1
* spawn <location> <rank>
    example:
    spawn europe infantry
* status
* spam <n>
    example:
    spam 5
* quit
* help
"""

_SERVER_HELP = """Possible commands:
* pause
* resume
* quit
* help
"""


def _emit(text):
    sys.stdout.write(text)
    sys.stdout.flush()
    return text


def print_client_help():
    """Print the client's commands and return the text shown."""
    return _emit(_CLIENT_HELP)


def print_server_help():
    """Print the server's commands and return the text shown."""
    return _emit(_SERVER_HELP)


def get_input():
    """Prompt, read one line and split it into words."""
    print("> ", end="", flush=True)
    return sys.stdin.readline().split()


def client_welcome():
    """Greet the player and ask for a username."""
    print("Welcome to the Peril client!")
    print("Please enter your username:")
    words = get_input()
    if not words:
        raise GameError("you must enter a username. goodbye")
    print(f"Welcome, {words[0]}!")
    print_client_help()
    return words[0]


def get_malicious_log():
    return random.choice(MALICIOUS_LOGS)


def print_quit():
    return _emit("I hate this game! (╯°□°)╯︵ ┻━┻\n")