"""
Hybrid Workout Tracker - Source Package

A local-first workout tracker: every day's record lives on the device,
and is optionally mirrored to a remote store keyed by device identity.

DESIGN PRINCIPLES:
1. Local first - the app works fully without the remote store
2. Sync trouble never blocks reading or writing a record
3. Most recent edit of a record wins, in full
4. Calendar keys follow the device's local calendar
5. Storage layers are swappable
"""

__version__ = "1.0.0"
__author__ = "Hybrid Workout Tracker Team"
