"""
N-Gram Graph Engine.

Represents texts as graphs whose vertices are character n-grams and
whose weighted edges record how often two n-grams appear within a
window of each other, and compares texts through those graphs.
"""

__version__ = "1.0.0"
__author__ = "N-Gram Graph Engine"
