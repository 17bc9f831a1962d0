"""
One-way mirror of an Exchange calendar into Google Calendar.
"""

__version__ = "1.0.0"
