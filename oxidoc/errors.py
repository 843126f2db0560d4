"""Exception types raised while indexing crates and reading the store."""


class OxidocError(Exception):
    """Base class for all errors reported by oxidoc."""


class StoreIOError(OxidocError):
    """Raised when a file or directory cannot be read or written."""

    def __init__(self, message: str, path: object = None) -> None:
        """Initialize the error with the offending path, if known."""
        super().__init__(f"{message}: {path}" if path is not None else message)
        self.path = path


class ManifestError(OxidocError):
    """Raised when Cargo.toml is missing or has no usable [package] table."""


class ParseError(OxidocError):
    """Raised when the source parser reports a syntax error."""

    def __init__(self, file: str, line: int, detail: str = "") -> None:
        """Initialize the error with the file name and 1-based line number."""
        message = f"Failed to parse {file} at line {line}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.file = file
        self.line = line


class EntryPointMissingError(OxidocError):
    """Raised when a crate has neither src/lib.rs nor src/main.rs."""


class ConfigError(OxidocError):
    """Raised when the configuration file is malformed."""


class FilenameDecodeError(OxidocError):
    """Raised when an escaped documentation filename cannot be decoded."""
