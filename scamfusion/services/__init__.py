"""
ScamFusion Services

Detection, parsing, registry enrichment, secondary model and fusion.
"""
