"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecordError(DomainException):
    """A transaction record violates the input contract"""

    def __init__(self, record_id: object, field: str, reason: str):
        super().__init__(f"Record {record_id!r}: invalid {field} ({reason})")
        self.record_id = record_id
        self.field = field
        self.reason = reason


class NoRecordsError(DomainException):
    """Nothing to file: the record collection is empty"""

    pass


class NoRealizedGainsError(DomainException):
    """No realized capital gains to report"""

    pass


class FilingError(DomainException):
    """Filing service rejected the return or is unavailable"""

    pass
