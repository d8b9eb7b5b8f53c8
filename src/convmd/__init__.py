"""convmd - convert markdown blog drafts between static-site dialects."""

__version__ = "0.1.0"
