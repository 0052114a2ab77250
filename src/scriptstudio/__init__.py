"""ScriptStudio - AI storyboard authoring for narrated scripts."""

__version__ = "0.1.0"
