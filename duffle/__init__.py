"""Bundle reference parsing, repository indexes, user IDs and file-backed storage."""

__version__ = "0.1.0"