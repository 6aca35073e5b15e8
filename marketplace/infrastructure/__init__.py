"""Infrastructure layer.

Configuration, database sessions, cache clients and logging setup.
"""
