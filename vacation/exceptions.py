"""
Exception hierarchy for the vacation service.

Business errors are kept apart from system errors; every custom exception
derives from VacationBaseException and carries an error code plus details
that the API layer renders as JSON.
"""

from typing import Any, Optional


class VacationBaseException(Exception):
    """
    Base business exception.

    Provides a uniform error code and message format for API responses.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None
    ):
        """
        Args:
            message: human readable error message
            code: error code used in API responses
            details: extra structured context
        """
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Render as an API error payload."""
        result = {
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# ==================== Data access ====================

class DataNotFoundError(VacationBaseException):
    """Requested record does not exist"""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code="DATA_NOT_FOUND",
            details={"resource": resource, "identifier": str(identifier)}
        )
        self.resource = resource
        self.identifier = identifier


class DatabaseError(VacationBaseException):
    """Database operation failed"""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Database {operation} failed: {reason}",
            code="DATABASE_ERROR",
            details={"operation": operation, "reason": reason}
        )


# ==================== External services ====================

class ExternalAPIError(VacationBaseException):
    """Downstream service answered with an error"""

    def __init__(self, provider: str, details: str, status_code: Optional[int] = None):
        super().__init__(
            message=f"External API error from {provider}: {details}",
            code="EXTERNAL_API_ERROR",
            details={"provider": provider, "status_code": status_code}
        )
        self.provider = provider
        self.status_code = status_code


class ServiceUnavailableError(VacationBaseException):
    """Downstream service could not be reached"""

    def __init__(self, service: str, reason: str):
        super().__init__(
            message=f"Service {service} is unavailable: {reason}",
            code="SERVICE_UNAVAILABLE",
            details={"service": service, "reason": reason}
        )
        self.service = service


# ==================== Validation ====================

class ValidationError(VacationBaseException):
    """Input validation failed"""

    def __init__(self, field: str, reason: str, value: Any = None):
        super().__init__(
            message=f"Validation failed for {field}: {reason}",
            code="VALIDATION_ERROR",
            details={"field": field, "reason": reason, "value": value}
        )
        self.field = field
        self.reason = reason


class InvalidDateRangeError(ValidationError):
    """Start/end dates do not form a usable leave period"""

    def __init__(self, start_date: str, end_date: str, reason: str = "Invalid date range"):
        super().__init__(
            field="date_range",
            reason=reason,
            value={"start": start_date, "end": end_date}
        )


class InvalidLeaveTypeError(ValidationError):
    """Leave type not usable for the requested operation"""

    def __init__(self, leave_type: str, reason: str):
        super().__init__(field="leave_type", reason=reason, value=leave_type)


# ==================== Business rules ====================

class BusinessLogicError(VacationBaseException):
    """Business rule violated"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="BUSINESS_LOGIC_ERROR",
            details=details
        )


class InvalidStateTransitionError(BusinessLogicError):
    """Leave request cannot move to the requested status"""

    def __init__(self, request_id: int, current: str, target: str):
        super().__init__(
            message=f"Leave request {request_id} cannot go from {current} to {target}",
            details={"request_id": request_id, "current": current, "target": target}
        )
        self.code = "INVALID_STATE_TRANSITION"


class InsufficientBalanceError(BusinessLogicError):
    """Not enough leave left for the request"""

    def __init__(self, employee_id: int, leave_type: str, requested: float, available: float):
        super().__init__(
            message=(
                f"Employee {employee_id} has {available} {leave_type} day(s) available, "
                f"requested {requested}"
            ),
            details={
                "employee_id": employee_id,
                "leave_type": leave_type,
                "requested": requested,
                "available": available,
            }
        )
        self.code = "INSUFFICIENT_BALANCE"


class LeaveOverlapError(BusinessLogicError):
    """Requested period overlaps an existing request"""

    def __init__(self, employee_id: int, conflicting_id: int):
        super().__init__(
            message=f"Leave period overlaps existing request {conflicting_id} of employee {employee_id}",
            details={"employee_id": employee_id, "conflicting_id": conflicting_id}
        )
        self.code = "LEAVE_OVERLAP"


# ==================== Configuration ====================

class ConfigurationError(VacationBaseException):
    """Configuration error"""

    def __init__(self, key: str, reason: str):
        super().__init__(
            message=f"Configuration error for {key}: {reason}",
            code="CONFIGURATION_ERROR",
            details={"key": key, "reason": reason}
        )


# ==================== Auth ====================

class AuthenticationError(VacationBaseException):
    """Authentication failed"""

    def __init__(self, reason: str = "Authentication failed"):
        super().__init__(
            message=reason,
            code="AUTHENTICATION_ERROR"
        )


class AuthorizationError(VacationBaseException):
    """Caller may not perform the action"""

    def __init__(self, resource: str, action: str):
        super().__init__(
            message=f"Not authorized to {action} {resource}",
            code="AUTHORIZATION_ERROR",
            details={"resource": resource, "action": action}
        )
