"""Safeguard client.

Typed Python client for the One Identity Safeguard for Privileged
Passwords REST API, with helpers for the access request lifecycle and for
waiting on asynchronous account tasks.
"""

__version__ = "0.1.0"
