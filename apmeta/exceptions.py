"""
Custom exception hierarchy for apmeta.

Every message is a single human-readable line; the CLI prints it as-is.
"""


class ApmetaError(Exception):
    """Base exception for all apmeta errors."""
    pass


class MissingDependencyError(ApmetaError):
    """Raised when a required external tool or library is unavailable."""
    pass


class IdentificationError(ApmetaError):
    """Raised when format identification finds no match or reports errors."""
    pass


class MetadataExtractionError(ApmetaError):
    """Raised when the technical metadata report cannot be produced."""
    pass


class TagExtractionError(ApmetaError):
    """Raised when embedded tags cannot be read. Never fatal."""
    pass


class ReferenceDataError(ApmetaError):
    """Raised when the authority or cycle list is unreadable or malformed."""
    pass


class EmptyBatchError(ApmetaError):
    """Raised when a folder holds no eligible files."""
    pass


class FileHashError(ApmetaError):
    """Raised when file hashing fails."""
    pass


class VerificationError(ApmetaError):
    """Raised when an apmeta file cannot be verified at all."""
    pass
