#!/usr/bin/env python3
"""Fatal error types raised while running the pipeline."""


class PipelineError(Exception):
    """Base class for errors that abort a whole run."""


class SourceError(PipelineError):
    """The input stream or the output sink could not be opened or read."""


class StructureNotFoundError(PipelineError):
    """The target array was never found in the JSON document."""

    def __init__(self, field: str):
        super().__init__(f"Failed to find '{field}' array in JSON")
        self.field = field
