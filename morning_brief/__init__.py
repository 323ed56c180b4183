"""
Stock Morning Brief

A cron-triggered job that pulls finance headlines from Google News RSS,
summarizes them in Korean with Gemini and caches the result in Vercel KV.
"""

__version__ = "1.0.0"
