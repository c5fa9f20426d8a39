from tilepuzzle.engine.gameplay.game import GamePlay, WinEvent

__all__ = ["GamePlay", "WinEvent"]
