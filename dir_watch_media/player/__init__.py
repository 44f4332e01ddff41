"""Downstream media consumers and the adapters that drive them."""
from .consumer import MediaConsumer, SettingsConsumer
from .sinks import SinkAdapter, SinkKind, adapter_for

__all__ = ["MediaConsumer", "SettingsConsumer", "SinkAdapter", "SinkKind", "adapter_for"]
