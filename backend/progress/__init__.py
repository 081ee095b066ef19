"""
Weight Progress API package.
"""
