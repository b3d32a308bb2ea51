"""
HTTP boundary for the authentication core.
"""
