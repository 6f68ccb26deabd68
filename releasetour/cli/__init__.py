"""
Command line interface for Release Tour.
"""
