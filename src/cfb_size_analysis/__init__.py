"""
CFB Size Analysis Package
Does college football player size (height, weight, BMI) track team win rate?
"""

__version__ = "1.0.0"

# Import main classes for easy access
from .config import config
from .data.loader import DataLoader
from .data.preprocessor import DataPreprocessor

__all__ = [
    'config',
    'DataLoader',
    'DataPreprocessor'
]
