"""
Utility functions module.

Time Semantics:
- Record times are integer seconds since midnight (1s resolution)
- Configuration may give clock times as "HH:MM:SS" strings
- The trading window is inclusive at both ends
"""
