"""
Core data and analytics layer.

This package contains:
- schema: survey vocabulary (column keywords, answer labels, enumerations)
- data_loader: fetch the published sheet as CSV and parse it into a snapshot
- columns: keyword-based column resolution
- aggregation: checkbox parsing and per-tool adoption rates
- cohorts: new-hire / veteran and tenure-band splits
- payments: spend bucket midpoints, paid rate and average spend
- query_engine: dashboard views built from one snapshot
- insights: Gemini prompt formatting and the insights endpoint logic
"""
