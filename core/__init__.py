# =============================================================================
# core/__init__.py
# =============================================================================
# The schema collection & merge engine.
#
#   models       → Node, FieldDefinition, OptionPair (+ demo data shapes)
#   tree         → UI tree → candidate fields / options
#   fingerprint  → change-detection keys
#   merge        → tree < overrides < registered, FieldRegistry
#   compiler     → merged fields → deterministic JSON Schema
#   validator    → development-time consistency checks
#   collector    → SchemaCollector: the above, fingerprint-gated, per tool
#
# Nothing in this package imports FastMCP, Google ADK or any other
# orchestration framework; it runs in a bare interpreter.
# =============================================================================
