"""
Ordering Question Engine

Append-only submission log with latest-wins reconstruction of presenter and
viewer views for the ordering question type.
"""

__version__ = "0.1.0"

QUESTION_TYPE = "asq-order-q"
