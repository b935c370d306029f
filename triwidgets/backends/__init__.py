"""
Session implementations for chat platforms.
"""
