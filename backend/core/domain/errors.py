"""
Domain Errors

The kinematics core degrades to "insufficient data" instead of raising.
These exceptions exist for the boundary: malformed input that the caller
owns and must be told about.
"""


class KinematicsError(Exception):
    """Base class for errors surfaced by the kinematics package."""


class MissingLandmarkError(KinematicsError, KeyError):
    """A pose frame lacks landmark names the core depends on."""

    def __init__(self, missing: tuple):
        self.missing = tuple(missing)
        names = ", ".join(getattr(name, "value", str(name)) for name in self.missing)
        super().__init__(f"Missing landmarks: {names}")

    def __str__(self) -> str:
        return self.args[0]
