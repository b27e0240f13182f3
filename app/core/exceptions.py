# /app/core/exceptions.py

class InvalidReportRequest(ValueError):
    """
    Raised by the service layer when a report request cannot be served as
    asked: an unknown report type or export format, or an unusable filter.
    Routers translate it into a 400 response.
    """
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
