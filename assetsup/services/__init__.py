"""
Read-side services used by the presentation layer
"""
