# --- Receiver validation -----------------------------------------------------
import re

from goimpl.reference import is_identifier

_IDENT = r"[^\W\d]\w*"
# T, *T, T[K], *T[K, V]
_TYPE_RE = re.compile(rf"\*?\s*(?P<name>{_IDENT})(?:\[\s*(?P<args>{_IDENT}(?:\s*,\s*{_IDENT})*)\s*\])?\Z")


def is_valid_receiver(text: str) -> bool:
    """
    Reports whether `text` can be used as the receiver of a generated method:
    "f", "F", "f F" or "f *F" (type arguments such as "f *F[T]" are allowed).
    """
    parts = text.split(None, 1)
    if not parts or not is_identifier(parts[0]):
        return False
    if len(parts) == 1:
        return True

    m = _TYPE_RE.match(parts[1].strip())
    if m is None or not is_identifier(m.group("name")):
        return False
    args = m.group("args")
    if args is not None and not all(is_identifier(a.strip()) for a in args.split(",")):
        return False
    return True
