from .score import ScoreRecord

__all__ = [
    "ScoreRecord",
]
