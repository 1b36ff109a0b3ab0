"""Core services: record sources, state reducer, resolver, derived views."""
from recordkeeper.core.resolver import RecordSourceResolver
from recordkeeper.core.sources import BundledAssetSource, RemoteRecordSource, StaticFileSource

__all__ = ["BundledAssetSource", "RecordSourceResolver", "RemoteRecordSource", "StaticFileSource"]
