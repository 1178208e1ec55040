"""A console window model with prompt, command history, reverse search and tab completion, plus a small demo shell."""

__version__ = "0.2.0"
__all__ = ["buffer", "console", "demo", "tab"]