"""Heatmap package exception hierarchy.

All heatmap exceptions derive from HeatmapError, enabling callers to
catch any failure of the loading phase with a single except clause.

The aggregation and classification functions never raise for missing
data; absent angles, holds and grades resolve to zero or empty values.
"""


class HeatmapError(Exception):
    """Base class for all heatmap errors.

    Attributes:
        message: Human-readable description of the error.

    Example:
        >>> try:
        ...     load_board_data(hold_map_path, usage_map_path)
        ... except HeatmapError as exc:
        ...     print(exc.message)
    """

    def __init__(self, message: str) -> None:
        """Initialize HeatmapError with a message.

        Args:
            message: Description of the error that occurred.
        """
        self.message = message
        super().__init__(self.message)


class DatasetLoadError(HeatmapError):
    """Raised when one of the two board datasets cannot be loaded.

    This exception is raised when:
    - The hold layout or usage map file does not exist
    - The file cannot be read
    - The file does not contain valid JSON

    Example:
        >>> raise DatasetLoadError("Usage map not found: data/usage.json")
    """
