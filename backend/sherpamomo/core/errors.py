from fastapi import HTTPException, status


class InvalidRequest(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class NotAuthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Admin access required"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class RateLimited(HTTPException):
    def __init__(self, detail: str = "Too many requests"):
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)


# Verification failures are all client errors (400), told apart by type and message

class VerificationNotFound(InvalidRequest):
    def __init__(self):
        super().__init__("Code expired or not found. Request a new code.")


class TooManyAttempts(InvalidRequest):
    def __init__(self):
        super().__init__("Too many attempts. Request a new code.")


class InvalidCode(InvalidRequest):
    def __init__(self):
        super().__init__("Invalid code")


class InvalidTransition(InvalidRequest):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot change order status from {current} to {target}")
        self.current = current
        self.target = target
