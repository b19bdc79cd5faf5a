"""Shared utilities — environment flags and cross-cutting helpers.

Rules
-----
* No business logic.
* Importable by any layer.
"""
