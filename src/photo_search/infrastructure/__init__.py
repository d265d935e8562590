"""
Infrastructure Layer - External Systems Integration

Contains:
- sources: Remote image search backends (Flickr)
- persistence: Local search history stores
- logger: Event logging sinks and dispatcher
"""
