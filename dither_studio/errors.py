from __future__ import annotations


class DitherStudioError(Exception):
    """Base class for everything the engine refuses to process."""

    kind = "error"


class InvalidDimensions(DitherStudioError):
    kind = "invalid_dimensions"


class UnsupportedAlgorithm(DitherStudioError, ValueError):
    kind = "unsupported_algorithm"

    def __init__(self, algorithm: object) -> None:
        super().__init__(f"Unsupported algorithm: {algorithm!r}")
        self.algorithm = algorithm


class OutOfRangeParameter(DitherStudioError, ValueError):
    kind = "out_of_range_parameter"

    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"Parameter {name!r} has no usable value: {value!r}")
        self.name = name
        self.value = value


class UnknownTemplate(DitherStudioError, LookupError):
    kind = "unknown_template"

    def __init__(self, template_id: object) -> None:
        super().__init__(f"Unknown template: {template_id!r}")
        self.template_id = template_id
