"""Rule-table congestion control: memory state, whiskers, whisker trees, links and the RAT sender."""

__version__ = "0.1.0"

__all__ = ["link", "memory", "rat", "whisker", "whisker_tree"]