"""Browsable view over LEGO deals and Vinted sales."""

__version__ = "1.0.0"
