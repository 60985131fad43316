"""
Burl-Fret Discord bots (Bumbles + DiscoCowboy): prefix commands and a health server.
"""

__version__ = "2.0.0"
