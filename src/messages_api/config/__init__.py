"""
Configuration management for the Messages API.

Contains Pydantic settings and the immutable relay configuration derived from
them, working across local-dev, aws-mock, and aws-prod deployment modes.
"""
