"""
Alias macro data models

Type-safe structures for the alias macro scanner.
"""

from dataclasses import dataclass


@dataclass
class MacroSpan:
    """
    A balanced {...} span isolated by the alias scanner

    Attributes:
        text: The exact span text, braces included (e.g. "{/greet}")
        name: Macro name without braces or closing slash (e.g. "greet")
        start: Index of the opening brace in the source
        end: Index of the closing brace in the source
        closing: True for the {/name} form

    Example:
        For source "Hi {/greet}" the closing tag isolates as:
        MacroSpan(text="{/greet}", name="greet", start=3, end=10, closing=True)
    """
    text: str
    name: str
    start: int
    end: int
    closing: bool
