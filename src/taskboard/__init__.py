"""Kanban task board backend with dense per-column task ordering."""

__version__ = "0.1.0"
