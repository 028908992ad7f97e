"""
Configuration module.

Default parameters, YAML overrides and validation for storage, logging and
accounting settings.
"""
