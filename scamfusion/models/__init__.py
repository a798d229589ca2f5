"""
ScamFusion Data Models Package

Pydantic models for data validation and serialization.
"""

from .detection import *
from .registry import *
from .alert import *
