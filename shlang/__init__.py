"""Lexer, Pratt parser, error reporting and runtime value model for shlang."""

__version__ = "2.1.2"
__all__ = ["__version__"]