from tilepuzzle.engine.worker.bridge import SolveBridge, SolveRequest, SolveResponse

__all__ = ["SolveBridge", "SolveRequest", "SolveResponse"]
