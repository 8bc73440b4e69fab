# utils/errors.py
"""Failure kinds raised by the verse lookup pipeline.

Every failure carries a ``kind`` (stable identifier the UI keys its message
off) and the HTTP status the proxy endpoint answers with.
"""


class VerseLookupError(Exception):
    kind = 'VerseLookupError'
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class InvalidRequest(VerseLookupError):
    """Unsupported language or source selector."""
    kind = 'InvalidRequest'
    status_code = 400


class ReferenceUnparseable(VerseLookupError):
    kind = 'ReferenceUnparseable'
    status_code = 400


class VerseNotFoundLocally(VerseLookupError):
    kind = 'VerseNotFoundLocally'
    status_code = 404


class VerseNotFoundRemote(VerseLookupError):
    kind = 'VerseNotFoundRemote'
    status_code = 404


class UpstreamTimeout(VerseLookupError):
    kind = 'UpstreamTimeout'
    status_code = 504

    def to_dict(self):
        payload = super().to_dict()
        payload['timeout'] = True
        return payload


class UpstreamError(VerseLookupError):
    kind = 'UpstreamError'
    status_code = 502


class LoadFailure(VerseLookupError):
    """The bulk dataset for a language could not be loaded. Retried on next access."""
    kind = 'LoadFailure'
    status_code = 503


class SourceUnavailable(VerseLookupError):
    """A configured source is missing its credentials."""
    kind = 'SourceUnavailable'
    status_code = 503
