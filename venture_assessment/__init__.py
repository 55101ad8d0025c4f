"""Venture Assessment Pipeline.

Sequential company, competitive and market analysis against remote
providers, with validated normalization of their responses and recoverable,
persisted assessment state.
"""

__version__ = "1.0.0"
