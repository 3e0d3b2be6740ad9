"""
Guild data import pipeline.

- **errors.py**: ShapeViolation / TypeMismatch / PersistenceFailure.
- **snapshot_validator.py**: fail-fast validation and moderation re-keying.
- **import_orchestrator.py**: concurrent, non-transactional persistence.
- **summary.py**: per-kind counts of an import.
- **runtime.py**: channel resolution against the live Discord client.
- **import_service.py**: validate, import and summarize in one call.
"""
