"""
Chat Relay - persists per-uid chat history and relays turns to an LLM.
"""

__version__ = "0.1.0"
