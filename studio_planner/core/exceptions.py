class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class ConflictError(DomainError):
    def __init__(self, message: str, code: str = "CF_001", details: dict | None = None):
        super().__init__(code, message, details)


class DuplicateExecutionError(ConflictError):
    def __init__(self, slot_id: str, date, details: dict | None = None):
        super().__init__(
            f"An execution already exists for slot {slot_id} on {date}",
            code="CF_EXECUTION_EXISTS",
            details=details or {"slot_id": slot_id, "date": str(date)},
        )


class ImmutableEntityError(DomainError):
    def __init__(self, entity: str, operation: str, details: dict | None = None):
        code = f"IMM_{entity.upper()}_001"
        msg = f"{entity} records are immutable and cannot be {operation}"
        super().__init__(code, msg, details or {"operation": operation})


class CollaboratorError(DomainError):
    def __init__(self, service: str, message: str, details: dict | None = None):
        code = f"EXT_{service.upper()}_001"
        super().__init__(code, message, details or {"service": service})
