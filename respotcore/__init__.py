"""Building blocks for a streaming music client: identifiers, credentials, cache, access point helpers, packet dispatch and metadata helpers."""

__version__ = "0.1.0"