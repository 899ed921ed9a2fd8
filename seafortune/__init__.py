"""UDP game server for a small multiplayer ocean adventure: wire protocol, world state and enemy simulation."""

__version__ = "0.2.0"
__all__ = ["gameworld", "vectors", "ocean", "protocol", "simulation", "server"]