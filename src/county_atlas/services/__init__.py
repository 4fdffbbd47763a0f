"""
Shared infrastructure used by datasource clients.

- http.py - requests session with retry/backoff and default timeout
"""
