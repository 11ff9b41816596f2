# src/captionguard/data/__init__.py
"""Data files shipped with captionguard (knowledge base, hashtag keywords)."""
