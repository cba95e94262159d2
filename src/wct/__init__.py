"""Warband Companion Tracker: live battle tracking for tabletop warbands."""

__version__ = "0.1.0"
