"""
Error types raised along the scan pipeline.

Each class carries the HTTP status and the user-safe message the API
returns for it, so the endpoint never has to inspect error text.
"""

GENERIC_MESSAGE = "An error occurred during analysis. Please try again."
TIMEOUT_MESSAGE = "Analysis timeout. Please try again."
AI_UNAVAILABLE_MESSAGE = "AI service unavailable. Please try again later."


class ScanError(Exception):
    status_code = 500
    public_message = GENERIC_MESSAGE
    retryable = False

    def to_response(self):
        """JSON body sent to the client"""
        return {
            'success': False,
            'message': self.public_message
        }


class InvalidBarcode(ScanError):
    status_code = 400
    public_message = 'Invalid barcode format. Please provide a 12 or 13 digit barcode.'

    def __init__(self, barcode=None):
        super().__init__(f"Invalid barcode: {barcode!r}")
        self.barcode = barcode


class ConfigurationError(ScanError):
    status_code = 500
    public_message = 'AI service configuration error. Please contact support.'


class ProductNotFound(ScanError):
    status_code = 404
    public_message = ('Product not found in our database. This could be a new product '
                      'or the barcode might be incorrect.')

    def __init__(self, barcode):
        super().__init__(f"Product {barcode} not found in Open Food Facts")
        self.barcode = barcode


# Open Food Facts failures

class FetchTimeout(ScanError):
    status_code = 408
    public_message = TIMEOUT_MESSAGE
    retryable = True

    def __init__(self):
        super().__init__('Request timeout - please check your internet connection')


class UpstreamError(ScanError):
    def __init__(self, status, status_text=''):
        super().__init__(f"API Error: {status} - {status_text}")
        self.status = status
        self.status_text = status_text


class NetworkError(ScanError):
    status_code = 503
    public_message = 'Network error. Please check your connection.'
    retryable = True

    def __init__(self):
        super().__init__('Network error - unable to reach OpenFoodFacts API')


class UnknownFetchError(ScanError):
    def __init__(self, message):
        super().__init__(f"Unexpected error: {message}")


# Language model failures

class InvalidAPIKey(ScanError):
    status_code = 503
    public_message = AI_UNAVAILABLE_MESSAGE

    def __init__(self):
        super().__init__('Invalid Groq API key. Please check your API key configuration')


class RateLimited(ScanError):
    retryable = True

    def __init__(self):
        super().__init__('Groq API rate limit exceeded. Please try again later')


class AnalysisTimeout(ScanError):
    status_code = 408
    public_message = TIMEOUT_MESSAGE
    retryable = True

    def __init__(self):
        super().__init__('AI analysis timeout - please try again')


class AnalysisFailed(ScanError):
    def __init__(self, message):
        super().__init__(f"AI analysis failed: {message}")


class InternalError(ScanError):
    public_message = 'Internal server error'
