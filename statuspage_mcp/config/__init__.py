"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Main application settings and environment configuration
- credentials: Statuspage credential resolution from settings and request headers
- logging: Structured logging configuration
"""
