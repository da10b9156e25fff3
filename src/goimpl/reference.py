# --- Interface reference parsing --------------------------------------------
import re

from goimpl.errors import ParseError
from goimpl.models.ast_models import InterfaceRef

GO_KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type",
    "var",
})

_IDENT_RE = re.compile(r"[^\W\d]\w*\Z")
_PATH_ELEMENT_RE = re.compile(r"[A-Za-z0-9_~-][A-Za-z0-9_.~-]*\Z")


def is_identifier(text: str) -> bool:
    """True for a Go identifier that is not a keyword."""
    return bool(_IDENT_RE.match(text)) and text not in GO_KEYWORDS


def parse_reference(raw: str) -> InterfaceRef:
    """
    Parses "path.Identifier" (e.g. "net/http.Handler", "io.Reader").

    The package path may be a full import path, a bare package name that the
    resolver will search for, or empty for the local package (".Greeter").
    """
    if len(raw.split()) != 1 or raw.strip() != raw:
        raise ParseError(raw, "expected a single path.Identifier token")
    if raw.endswith("/"):
        raise ParseError(raw, "cannot end with '/'")

    dot = raw.rfind(".")
    if dot < 0:
        raise ParseError(raw, "missing '.' between package and identifier")
    path, identifier = raw[:dot], raw[dot + 1:]
    if not identifier:
        raise ParseError(raw, "cannot end with '.'")
    if not is_identifier(identifier):
        raise ParseError(raw, f"{identifier!r} is not a valid identifier")

    # Only one selector is allowed after the last path element: pkg.Typ, not pkg.Typ.Foo
    last_element = path[path.rfind("/") + 1:]
    if "." in last_element:
        raise ParseError(raw, "only one '.' is allowed after the package path")

    if path:
        if "/" not in path and not is_identifier(path):
            raise ParseError(raw, f"{path!r} is not a valid package name")
        for element in path.split("/"):
            if not _PATH_ELEMENT_RE.match(element) or element.endswith("."):
                raise ParseError(raw, f"malformed import path element {element!r}")

    return InterfaceRef(package_path=path, identifier=identifier)
