"""threadview: conversation aggregation and turn-pairing engine.

Fetches conversation histories from an assistant backend, merges them with
the messages produced in the current session, pairs them into turns and
exposes a single immutable view state to the host UI.
"""

__version__ = "0.1.0"
