"""Custom exception hierarchy for Light Up solving and generation."""


class LightUpError(Exception):
    """Base exception for solver and generator failures."""


class MalformedDescriptionError(LightUpError):
    """Raised when a puzzle description cannot be decoded."""


class InvalidParamsError(LightUpError):
    """Raised when puzzle parameters are out of range or inconsistent."""


class GridContractError(LightUpError):
    """Raised when a mutator is asked to break a grid invariant."""


class GenerationExhaustedError(LightUpError):
    """Raised when no valid puzzle was found within the retry budget."""


class UnsolvablePuzzleError(LightUpError):
    """Raised when neither the current state nor the clean puzzle can be solved."""


class ValidationError(LightUpError):
    """Raised when a grid fails the rule checks."""
