"""Shared package for the BA Survey application.

This package contains the code every front end of the survey app relies on:

- Enums (enums.py) - Catalogs offered by the BA Survey form (request type, tariff, outcome)
- Schemas (schemas.py) - Pydantic models for survey records and render options
- Validation (validation.py) - Required-field checks that turn form input into a record
- Document (document.py) - Deterministic composer for the printable BA Survey document
- Utility functions (utils.py) - Signature image encoding

Nothing in here performs I/O except the signature helpers reading image files.
"""
