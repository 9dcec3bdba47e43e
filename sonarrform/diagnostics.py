# encoding: utf-8
"""
Errors raised inside the provider and the diagnostics the host runtime sees.

Library code raises the exceptions below. The lifecycle engine catches them at
the boundary of each operation and turns them into ``Diagnostic`` entries on
the operation's ``Diagnostics`` accumulator. State is only handed back to the
host when the accumulator holds no errors.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from sonarrform.constants import SENSITIVE_VALUE
from sonarrform.utils import redact


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Kind(str, Enum):
    """Display names of every diagnostic the provider emits."""

    CONFIGURATION = "Configuration Error"
    CLIENT = "Client Error"
    RESOURCE = "Resource Error"
    DATA_SOURCE = "Data Source Error"
    UNEXPECTED_RESOURCE_CONFIGURE_TYPE = "Unexpected Resource Configure Type"
    UNEXPECTED_DATA_SOURCE_CONFIGURE_TYPE = "Unexpected DataSource Configure Type"
    UNEXPECTED_IMPORT_IDENTIFIER = "Unexpected Import Identifier"
    CANCELLED = "Operation Cancelled"
    DEPRECATED = "Deprecated Attribute"
    IMPLEMENTATION_CHANGED = "Implementation Changed"


class SonarrformError(Exception):
    """Base class for every error the provider raises."""

    kind = Kind.RESOURCE


class ConfigurationError(SonarrformError):
    kind = Kind.CONFIGURATION


class ClientError(SonarrformError):
    """A transport failure, an error status from the server or an undecodable response."""

    kind = Kind.CLIENT

    def __init__(self, cause, details=None, status_code=None):
        super().__init__(str(cause))
        self.cause = cause
        self.details = details
        self.status_code = status_code

    def describe(self, action, name):
        message = f"Unable to {action} {name}, got error: {self.cause}"
        if self.details:
            message += f"\nDetails:\n{self.details}"
        return message


class ResourceNotFound(ClientError):
    """The server answered 404 for a single item."""

    def __init__(self, cause="resource not found", details=None):
        super().__init__(cause, details=details, status_code=404)


class FieldKindError(ClientError):
    """A known field came back from the server with a value of the wrong kind."""

    def __init__(self, field_name, expected, got):
        self.field_name = field_name
        self.expected = expected
        self.got = got
        super().__init__(
            f"field '{field_name}' expected {expected} but the server sent {got}; "
            "the server schema is newer than this provider, upgrade the provider"
        )


class DataNotFoundError(SonarrformError):
    kind = Kind.DATA_SOURCE

    def __init__(self, kind, field_name, search):
        self.data_kind = kind
        self.field_name = field_name
        self.search = search
        super().__init__(
            f"data source not found: no {kind} with {field_name} '{search}'"
        )


class OperationCancelled(SonarrformError):
    kind = Kind.CANCELLED

    def __init__(self, message="operation cancelled by the host runtime"):
        super().__init__(message)


class ImportIdentifierError(SonarrformError):
    kind = Kind.UNEXPECTED_IMPORT_IDENTIFIER

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(
            f'Expected import identifier with format: ID. Got: "{identifier}"'
        )


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    summary: str
    detail: str = ""

    def __str__(self):
        return f"{self.severity.value}: {self.summary}: {self.detail}"


@dataclass
class Diagnostics:
    """Per-operation accumulator of diagnostics."""

    entries: List[Diagnostic] = field(default_factory=list)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def add_error(self, summary, detail="", secrets: Optional[Iterable] = None):
        self._add(Severity.ERROR, summary, detail, secrets)

    def add_warning(self, summary, detail="", secrets: Optional[Iterable] = None):
        self._add(Severity.WARNING, summary, detail, secrets)

    def _add(self, severity, summary, detail, secrets):
        if isinstance(summary, Kind):
            summary = summary.value
        if secrets:
            detail = redact(detail, secrets, SENSITIVE_VALUE)
        self.entries.append(Diagnostic(severity, summary, detail))

    def extend(self, other: "Diagnostics"):
        self.entries.extend(other.entries)

    def has_error(self):
        return any(d.severity is Severity.ERROR for d in self.entries)

    @property
    def errors(self):
        return [d for d in self.entries if d.severity is Severity.ERROR]

    @property
    def warnings(self):
        return [d for d in self.entries if d.severity is Severity.WARNING]
