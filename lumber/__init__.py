"""Log classification facade, event types and an asyncio processing pipeline."""

__version__ = "0.1.0"

__all__ = ["buffer", "client", "events", "options", "pipeline"]