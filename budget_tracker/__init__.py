"""
Budget Tracker - Source Package

A personal budget tracker: record income and expenses, see where the
money goes, and get AI-generated spending insights.

DESIGN PRINCIPLES:
1. Recorded transactions are the source of truth
2. AI output is advisory only and never blocks the user
3. Every remote failure degrades to a local answer
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
