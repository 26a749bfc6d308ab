"""
Prediction and reconciliation engine.

Key components:
- Adapters: Normalize NBA.com stats, ESPN schedules and The Odds API lines
- Matchers: Resolve team abbreviations and parse matchup strings
- Predictor: Linear trend fit with confidence and error margin
- Orchestrator: Fetch concurrently, tolerate partial failure, merge and recommend
"""
