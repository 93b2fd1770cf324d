"""
GuideTrack - Source Package

Finance tracking for freelance tour guides: tours, agencies, expenses,
tips and commissions, and the summaries and reports derived from them.

DESIGN PRINCIPLES:
1. Derived numbers are always computed, never stored
2. The calculation core is pure - state flows in, values flow out
3. Storage is whole-collection read/replace and swappable
4. Every state change is auditable
"""

__version__ = "1.0.0"
__author__ = "GuideTrack Team"
