"""Adapter modules for converting IR values to external representations.

WHY: The core IR (Cue, WordTiming) is snake_case and typed; consumers such
as the CLI's JSON output and browser players expect plain dicts with
camelCase keys. Adapters keep that mapping out of the core.

RULES:
- Adapters are pure data transformations: no I/O, no side effects.
- Adapters must not modify the source IR objects.
"""

from ssml_pipeline.adapters.cue_adapter import cue_to_record, cues_to_records

__all__ = ["cue_to_record", "cues_to_records"]
