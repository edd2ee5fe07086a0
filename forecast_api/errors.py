"""
Error taxonomy for the forecast API.

Every error carries the HTTP status it maps to and a message that is safe
to show to the caller. InternalError never exposes its cause.
"""


class ForecastAPIError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ForecastAPIError):
    status_code = 400
    message = "Invalid request."


class InvalidDateFormat(ValidationError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Invalid {field} format.")


class DateRangeInverted(ValidationError):
    message = "startDate cannot be after endDate."


class NotFoundError(ForecastAPIError):
    status_code = 404
    message = "Not found."


class CityNotFound(NotFoundError):
    message = "City not found."


class CountryNotFound(NotFoundError):
    message = "Country not found."


class SourceNotFound(NotFoundError):
    message = "Source not found."


class NoForecastsFound(NotFoundError):
    message = "No forecasts found for the specified criteria."


class InternalError(ForecastAPIError):
    status_code = 500
    message = "Internal Server Error"
