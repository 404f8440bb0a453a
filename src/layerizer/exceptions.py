"""Exception hierarchy for Layerizer."""


class LayerizerError(Exception):
    """Base exception for all Layerizer errors."""

    pass


class InputError(LayerizerError):
    """Errors in the inputs of a pipeline run, raised before any stage runs."""

    pass


class InvalidImageError(InputError):
    """Malformed or empty raster image."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid image: {reason}")


class InvalidSettingsError(InputError):
    """Project settings that cannot drive a pipeline run."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid setting '{field}': {reason}")


class ImageLoadError(InputError):
    """Error decoding an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image '{path}': {reason}")


class ProcessingError(LayerizerError):
    """Error processing a specific layer."""

    def __init__(self, layer_order: int, reason: str) -> None:
        self.layer_order = layer_order
        self.reason = reason
        super().__init__(f"Error processing layer {layer_order}: {reason}")


class ExportError(LayerizerError):
    """Errors related to writing vector output."""

    pass


class ExportWriteError(ExportError):
    """Error writing an output file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write '{path}': {reason}")
