from . import (
    canon,
    config,
    exceptions,
    types,
    utils,
    ingest,
    validate,
    segments,
    encode,
    formats,
    summary,
    batch,
)

__all__ = [
    "canon",
    "config",
    "exceptions",
    "types",
    "utils",
    "ingest",
    "validate",
    "segments",
    "encode",
    "formats",
    "summary",
    "batch",
]
