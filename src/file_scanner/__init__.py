"""File Scanner package initialisation."""

__all__ = [
    "core",
    "transport",
    "ui",
    "shared",
]
