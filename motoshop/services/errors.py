class ServiceError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequest(ServiceError):
    status_code = 400


class NotFound(ServiceError):
    status_code = 404


class RenderFailure(ServiceError):
    """The invoice document could not be produced or written."""
    status_code = 500

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.detail = detail


class PersistenceFailure(ServiceError):
    """
    The document is stored but writing its invoice lines failed part-way.
    Lines inserted before the failure stay in place.
    """
    status_code = 500

    def __init__(self, message, detail=None, document=None, inserted=0):
        super().__init__(message)
        self.detail = detail
        self.document = document
        self.inserted = inserted
