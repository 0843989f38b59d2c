"""
Completion provider implementations.
"""

from .groq_provider import GroqProvider

__all__ = ["GroqProvider"]
