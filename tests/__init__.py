"""Test suite for the formstate engine.

This package contains tests for:
- Field kinds, descriptors and state snapshots
- Validation rules and eager error computation
- Submission state machine transitions
- Event emission and serialization
- Engine mutations, reset, submission gating and focus routing
"""
