"""
KPC AI usage survey dashboard.

Sub-packages:
- core: sheet loading, column resolution and response aggregation
- api:  Flask endpoint for Gemini-generated insights
- ui:   streamlit dashboard
"""

__version__ = "0.1.0"
