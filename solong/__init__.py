"""A tile-based game: collect every item, then reach the exit.

Map reading and checks live in ``solong.maps``, the rules in
``solong.game``, and the pygame window in ``solong.display``.
"""

__version__ = "0.1.0"