"""
Test Suite
==========

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP bridge and stdio server wiring
"""
