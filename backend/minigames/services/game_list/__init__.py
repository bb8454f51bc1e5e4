"""Game-list domain services.

One module per game type (``flip_tiles`` ...), each exposing plain
functions for create/detail/update/delete. The shared fetch, type-check
and ownership rules live in :mod:`.access` so every type enforces them the
same way. HTTP concerns stay in :mod:`minigames.api`.
"""
