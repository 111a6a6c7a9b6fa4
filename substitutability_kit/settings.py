"""
Checker settings.
Externalizes limits and logging config via environment variables.
"""
import os


class AppSettings:
    """Checker settings with environment variable support."""

    def __init__(self):
        # Minimum number of sample inputs required before any operation is validated
        self.min_sample_inputs: int = int(os.getenv("MIN_SAMPLE_INPUTS", "1"))
        # Guard against pathological chains; cycles are detected independently
        self.max_ancestor_depth: int = int(os.getenv("MAX_ANCESTOR_DEPTH", "64"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = AppSettings()
