"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named geodesy, padding and zoom constants
- exceptions: Custom exception hierarchy
"""
