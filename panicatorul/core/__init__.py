"""
panicatorul.core: shared error/diagnostic/location types used across layers.

Modules:
  - errors: PanicatorulError and its reason codes
  - diagnostics: Diagnostic record printed by the CLI
  - source_location: SourceLocation / DebugLocations value types
"""

__all__ = [
    "errors",
    "diagnostics",
    "source_location",
]
