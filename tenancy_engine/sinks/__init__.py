"""Output sinks for exporting calculation results."""

from tenancy_engine.sinks.console import ConsoleSink
from tenancy_engine.sinks.json_file import JsonFileSink
from tenancy_engine.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
