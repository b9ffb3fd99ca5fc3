class HttpChainError(Exception):
    pass


class InputError(HttpChainError):
    pass


class RequestError(HttpChainError):
    pass


class ReportError(HttpChainError):
    pass
