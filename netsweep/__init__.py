"""IPv4 scan building blocks: address sharding, option parsing, JSON summaries and blacklist filtering."""

__version__ = "0.1.0"