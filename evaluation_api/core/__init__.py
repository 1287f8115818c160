"""
Core configuration, logging, errors and constants.
"""
