# backend/app/__init__.py
"""
Hospital administration notification log package.

This package contains:
- notifications: notification store, templater and debug console
- utils: environment variable helpers
"""
