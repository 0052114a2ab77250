"""Error types raised by the storyboard workflow."""


class StudioError(Exception):
    """Base class for all ScriptStudio errors."""


class MissingInputError(StudioError):
    """A required input is missing or invalid; no remote call was made."""


class GatewayError(StudioError):
    """A generative-AI call failed or returned an unusable response."""


class InvalidProjectFileError(StudioError):
    """A project file could not be parsed or validated."""


class NothingToExportError(StudioError):
    """No scene carries the prompt that was requested for export."""


class PipelineBusyError(StudioError):
    """A batch was started while another one is still running."""
