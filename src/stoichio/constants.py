"""Shared constants."""

# Atomic masses are stored as integers in milli-mass-units (1 u = 1000).
MILLI_PER_UNIT = 1000

# Milligrams per gram.
MG_PER_GRAM = 1000.0

ARROW_CHARS = frozenset("=<>")

# Deepest allowed nesting of () / [] groups inside one formula.
MAX_GROUP_DEPTH = 32

PERIODIC_TABLE_ENV = "STOICHIO_PERIODIC_TABLE"
