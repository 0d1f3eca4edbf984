"""
Adapter layer for the Messages API.

Contains the object store (S3) and queue (SQS) adapters the relay and the
consumer are built on.
"""
