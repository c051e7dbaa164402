"""
Cloud Notes Hub - personal notes with public/private visibility.

Per-user notes, an admin view over everyone's notes, and realtime
refresh of open dashboards when the underlying tables change.

Version: 2.0.0
"""

__version__ = "2.0.0"
