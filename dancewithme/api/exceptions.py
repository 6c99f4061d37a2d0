from fastapi import HTTPException


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class UnavailableError(HTTPException):
    def __init__(self, detail: str = "Service unavailable"):
        super().__init__(status_code=500, detail=detail)
