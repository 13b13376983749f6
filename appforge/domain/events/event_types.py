from enum import Enum


class GenerationEventType(str, Enum):
    """What happened during one generation or fix turn."""

    PROMPT_WRITTEN = "prompt_written"        # Manual mode: prompt file saved
    RESPONSE_RECEIVED = "response_received"  # Provider returned a reply
    FILE_EXTRACTED = "file_extracted"
    FILE_WRITTEN = "file_written"
    GENERATION_COMPLETED = "generation_completed"
    GENERATION_EMPTY = "generation_empty"    # Reply held no files
