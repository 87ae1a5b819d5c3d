"""
clientbench - REST API client benchmarking harness.
"""

__version__ = "1.0.0"
