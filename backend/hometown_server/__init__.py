"""
Hometown Content Server — Package Initializer
===============================================

What: Marks `hometown_server` as a Python package and carries the version.
Who:  Imported by uvicorn (`hometown_server.main:app`), pytest, and the
      health route.

Architecture Note:

    ┌─────────────────────────────────────┐
    │      Routes + Middleware (HTTP)     │  ← status codes, headers, CORS
    ├─────────────────────────────────────┤
    │     Services (Upload / Document)    │  ← validation, naming, I/O
    ├─────────────────────────────────────┤
    │             Filesystem              │  ← uploads/ and data.json
    └─────────────────────────────────────┘

    Routes never touch the filesystem directly; the stores can be tested
    without HTTP.
"""

__version__ = "1.0.0"
