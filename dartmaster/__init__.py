"""
dartmaster - scorekeeping engine for 301/501 darts.
"""
__version__ = "0.1.0"
