"""
Command-line interface for exnotic.
"""
