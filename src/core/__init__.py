"""Core domain package for untracker.

Core contains the link rules, matching and rewriting logic without any
Telegram or HTTP client code, keeping the business logic portable.
"""
