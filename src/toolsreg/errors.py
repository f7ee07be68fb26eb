"""Exception hierarchy for fatal pipeline errors.

Validation problems are never raised; they are collected as
:class:`toolsreg.validation.Violation` records. The exceptions here abort a run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class RegistryError(RuntimeError):
    """Base class for errors that stop the pipeline."""


class ConfigError(RegistryError):
    """Raised when the pipeline configuration file is invalid."""


class TaxonomyError(RegistryError):
    """Raised when a taxonomy document does not have the expected shape."""


class RegistryFileError(RegistryError):
    """Raised when a declared input or output file cannot be read or written."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class SnapshotIntegrityError(RegistryError):
    """Raised when a snapshot does not match its integrity hash."""
