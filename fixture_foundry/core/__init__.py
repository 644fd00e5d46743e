"""Cross-cutting concerns shared by the registry: config, errors, logging."""

from __future__ import annotations
