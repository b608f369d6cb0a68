# Errors surfaced to whatever front end drives the exchange

class ProtocolError(Exception):
    pass

class InvalidInputError(ProtocolError, ValueError):
    """Text that does not convert to a usable integer."""

class InvalidGeneratorError(ProtocolError):
    def __init__(self, generator, prime):
        super().__init__(f"{generator} is not a primitive root modulo {prime}")
        self.generator = generator
        self.prime = prime

class SharedSecretMismatchError(ProtocolError):
    """Both sides ran the derivation and got different numbers.

    This points at a logic or parameter bug, not at bad user input.
    """

    def __init__(self, ours, theirs):
        super().__init__(f"Shared secrets do not match: {ours} != {theirs}")
        self.ours = ours
        self.theirs = theirs

class InvalidSignatureError(ProtocolError):
    pass
