"""
Components package for the forecast poll cycle.
Provides HashCalculator, ChangeDetector, Bootstrapper and MessageChunker.
"""
from services.components.hash_calculator import HashCalculator
from services.components.change_detector import ChangeDetector
from services.components.bootstrapper import Bootstrapper
from services.components.message_chunker import MessageChunker, chunk_text

__all__ = [
    "HashCalculator",
    "ChangeDetector",
    "Bootstrapper",
    "MessageChunker",
    "chunk_text",
]
