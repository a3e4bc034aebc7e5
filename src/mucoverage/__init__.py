"""mucoverage — Meaningful-use code coverage statistics for patient summaries.

Classifies the entries of C32/CCR patient summary sections as unusable,
meaningful-use coded, or alien coded, and aggregates them by description
for reporting.
"""

__version__ = "1.0.0"
