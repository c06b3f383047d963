"""Client input errors raised by the analysis entry points."""


class AnalysisInputError(ValueError):
    """The caller supplied nothing usable; fixing the input fixes the error."""


class MissingInputError(AnalysisInputError):
    """None of HTML, screenshot or URL was provided."""


class InsufficientContentError(AnalysisInputError):
    """HTML was provided but is too short to score."""
