class ConnegError(Exception):
    pass


class ParseError(ConnegError, ValueError):
    pass


class InvalidArgumentError(ConnegError, ValueError):
    pass
