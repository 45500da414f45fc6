"""
Reporting module for VATCENTRAL.

Provides read-only renderings of completed workshop sessions.
"""
