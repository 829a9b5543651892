from .base import Argument, DebateInfo, DebateSource, FactorySource, MintLogSource, UserStats
from .memory import MemoryChain, MemoryDebate

__all__ = [
    "Argument",
    "DebateInfo",
    "DebateSource",
    "FactorySource",
    "MintLogSource",
    "UserStats",
    "MemoryChain",
    "MemoryDebate",
]
