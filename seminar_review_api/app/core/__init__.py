"""
Core infrastructure: settings, logging, errors, persistence and locks.
"""
