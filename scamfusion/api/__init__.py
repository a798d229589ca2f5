"""
ScamFusion API Module

FastAPI routes and dependencies.
"""
