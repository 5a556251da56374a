"""
Module 07 - Allowlist API (FastAPI)

HTTP API for the Merkle allowlist engine:
- POST /tree - Build a tree and return its root
- POST /proof - Inclusion proof for one address
- POST /verify - Verify a proof against a root
- POST /eligibility - Eligibility check with allocation
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
