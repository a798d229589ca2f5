"""
ScamFusion

Multi-signal scam message detection: lexical scoring, URL risk, fraud
registry lookups and an optional secondary model fused into one verdict.
"""

__version__ = "1.0.0"
