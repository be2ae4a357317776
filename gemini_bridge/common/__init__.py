"""
Common utilities shared by the translators, upstream client and API layer.
"""
