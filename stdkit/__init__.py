"""Small utilities: atomics, bit sets, compact arrays, a thread-safe set, an auto-refresh cache and tag helpers."""

__version__ = "0.1.0"
__all__ = ["atomic", "bitset", "compact_array", "sync_set", "auto_refresh", "pflag_tag"]