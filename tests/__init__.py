"""
Carrousel Test Suite

Test Categories:
- unit/: Fast, isolated unit tests, including the seeded statistical checks
"""
