"""Game state, console helpers, game logs and AMQP messaging for the Peril war game."""

__version__ = "0.1.0"