from tilepuzzle.engine.gamestate.state import GameState, Phase

__all__ = ["GameState", "Phase"]
