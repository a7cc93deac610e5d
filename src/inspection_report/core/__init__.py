"""
Core Package

Shared models, schema validation and small utilities.
"""
