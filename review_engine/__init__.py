"""Recurring-task review engine.

Re-evaluates completed recurring compliance tasks once they pass their next
review date, moves them to todo or failed based on their evidence
automations, and notifies the organization by email and in-app.
"""

__version__ = "1.0.0"
