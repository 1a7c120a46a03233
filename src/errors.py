"""Error kinds raised by the graph pipeline and loaders."""


class SoftwareGraphError(Exception):
    """Base class for errors raised by this package."""


class MalformedInputError(SoftwareGraphError, ValueError):
    """The raw graph is not shaped like ``{"elements": {"nodes": [...], "edges": [...]}}``."""


class ResourceLoadError(SoftwareGraphError, RuntimeError):
    """A graph or stylesheet resource could not be read or fetched."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load '{source}': {reason}")
        self.source = source
        self.reason = reason
