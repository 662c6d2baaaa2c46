"""
Kickabout - five-a-side squad picker

Turns a list of free-text player names (typed, pasted, or OCR'd from a
screenshot) into two rating- and position-balanced squads.

Main components:
- players: Roster records, alias parsing and name-to-player resolution
- teams: Greedy two-team balancing
- config: Matching thresholds and balancing defaults
"""

__version__ = "1.0.0"
