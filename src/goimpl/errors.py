# --- Error types -------------------------------------------------------------


class ImplError(Exception):
    """Base class for every failure raised while resolving an interface."""


class ParseError(ImplError):
    """The interface reference string is malformed."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"invalid interface reference {reference!r}: {reason}")


class LoadError(ImplError):
    """A package could not be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"could not load package {path!r}: {reason}")


class PackageNotFoundError(LoadError):
    def __init__(self, path: str):
        super().__init__(path, "no package found on the search path")


class PackageSyntaxError(LoadError):
    def __init__(self, path: str, file_path: str):
        self.file_path = file_path
        super().__init__(path, f"syntax error in {file_path}")


class NotFoundError(ImplError):
    def __init__(self, package_path: str, identifier: str):
        self.package_path = package_path
        self.identifier = identifier
        super().__init__(f"type {identifier} not found in package {package_path or '.'}")


class NotInterfaceError(ImplError):
    def __init__(self, package_path: str, identifier: str, kind: str):
        self.package_path = package_path
        self.identifier = identifier
        self.kind = kind
        super().__init__(
            f"{package_path or '.'}.{identifier} is a {kind} declaration, not an interface"
        )


class EmbedCycleError(ImplError):
    """An interface (transitively) embeds itself."""

    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__("interface embedding cycle: " + " -> ".join(self.chain))


class InvalidReceiverError(ImplError):
    def __init__(self, receiver: str):
        self.receiver = receiver
        super().__init__(f"invalid receiver: {receiver!r}")
