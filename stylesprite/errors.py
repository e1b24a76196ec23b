"""Exceptions raised while registering references and building a sprite."""


class SpriteError(Exception):
    pass


class ConfigurationError(SpriteError):
    pass


class ValidationError(SpriteError):
    def __init__(self, message, key=None):
        super().__init__(message)
        self.key = key


class UnsupportedFormatError(SpriteError):
    pass


class ImageLoadError(SpriteError):
    def __init__(self, message, filename=None, lineno=None):
        if lineno is not None:
            message += f"; CSS line nr #{lineno}"
        super().__init__(message)
        self.filename = filename
        self.lineno = lineno


class EncodingError(SpriteError):
    pass


class ExternalToolError(SpriteError):
    def __init__(self, message, command=None, returncode=None):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
