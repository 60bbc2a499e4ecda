"""Custom exceptions for osmtags."""


class OsmTagsError(Exception):
    """Base exception for all osmtags errors."""

    pass


class SchemaError(OsmTagsError):
    """Tagging schema operation failed."""

    pass


class SchemaLoadError(SchemaError):
    """Tagging schema could not be read or is structurally invalid."""

    def __init__(self, location: str, reason: str):
        """Initialize exception with the failing location and cause.

        Args:
            location: Source location (directory, URL or file) that failed.
            reason: Human-readable description of the failure.
        """
        self.location = location
        self.reason = reason
        super().__init__(f"Failed to load schema from {location}: {reason}")


class SchemaStructureError(SchemaError):
    """A schema file does not have the expected shape."""

    def __init__(self, file: str, reason: str):
        self.file = file
        self.reason = reason
        super().__init__(f"Invalid schema in {file}: {reason}")


class SchemaNotLoadedError(SchemaError):
    """Schema accessed before the first successful load."""

    def __init__(self) -> None:
        super().__init__("Schema not loaded. Call load_schema() or warmup() first.")


class NotFoundError(OsmTagsError):
    """An addressed schema entity does not exist."""

    pass


class PresetNotFoundError(NotFoundError):
    """Preset does not exist."""

    def __init__(self, preset: str):
        self.preset = preset
        super().__init__(f"Preset not found: {preset}")


class CategoryNotFoundError(NotFoundError):
    """Preset category does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Category not found: {name}")


class SourceError(OsmTagsError):
    """Base exception for schema source operations."""

    pass


class SourceFetchError(SourceError):
    """Failed to fetch a schema file."""

    def __init__(self, uri: str, reason: str):
        self.uri = uri
        self.reason = reason
        super().__init__(f"Failed to fetch {uri}: {reason}")


class TagInputError(OsmTagsError):
    """Tag input could not be interpreted."""

    pass


class TagParseError(TagInputError):
    """A line of flat tag text is malformed."""

    def __init__(self, line: int, reason: str):
        """Initialize exception with the offending line.

        Args:
            line: 1-based line number in the input text.
            reason: Description of what is wrong with the line.
        """
        self.line = line
        self.reason = reason
        super().__init__(f"Invalid tag format at line {line}: {reason}")


class MissingSeparatorError(TagParseError):
    """Line has no '=' separator."""

    def __init__(self, line: int):
        super().__init__(line, "missing '=' separator. Expected format: key=value")


class EmptyKeyError(TagParseError):
    """Line has nothing before the '=' separator."""

    def __init__(self, line: int):
        super().__init__(line, "empty key before '='")


class EmptyValueError(TagParseError):
    """Line has nothing after the '=' separator."""

    def __init__(self, line: int, key: str):
        self.key = key
        super().__init__(line, f"empty value for key '{key}'")
