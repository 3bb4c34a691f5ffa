"""Infrastructure adapters.

Adapters implement protocols defined in domains/oauth/protocols.py.
Each adapter wraps external infrastructure (httpx, the filesystem).
"""
