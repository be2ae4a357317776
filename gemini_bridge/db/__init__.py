"""
Database and Redis connection management.
"""
