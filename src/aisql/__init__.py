"""Cortex AI SQL argument normalization.

The aisql layer converts a loosely-typed JSON argument object into a strict, per-function payload,
which is then rendered into SQL text by `src.sql.builder`.
"""
