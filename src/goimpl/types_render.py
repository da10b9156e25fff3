# --- Go type expression rendering -------------------------------------------
import re
from typing import Optional

from goimpl.tree_sitter_helpers import collapse_whitespace, named_children, node_text

PREDECLARED_TYPES = frozenset({
    "any", "bool", "byte", "comparable", "complex64", "complex128", "error",
    "float32", "float64", "int", "int8", "int16", "int32", "int64", "rune",
    "string", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
})

_MAJOR_VERSION_RE = re.compile(r"v[0-9]+\Z")


def assumed_package_name(import_path: str) -> str:
    """
    Guesses a package's name from its import path, the way goimports does:
    the last element, skipping a trailing major version ("/v2"), with a "go-"
    prefix and any ".suffix" or "-suffix" dropped.
    """
    elements = [e for e in import_path.split("/") if e]
    if not elements:
        return import_path
    name = elements[-1]
    if _MAJOR_VERSION_RE.match(name) and len(elements) > 1:
        name = elements[-2]
    if name.startswith("go-"):
        name = name[len("go-"):]
    return re.split(r"[.\-]", name, maxsplit=1)[0]


class TypeRenderer:
    """
    Renders tree-sitter Go type nodes as source text suitable for code that
    lives outside the declaring package.

    Identifiers declared in the package are qualified with `qualifier`;
    `alias.T` references are rewritten with the imported package's name.
    """

    def __init__(self, source_bytes: bytes, qualifier: str = "",
                 imports: Optional[dict[str, str]] = None,
                 type_params: frozenset[str] = frozenset()):
        self.source_bytes = source_bytes
        self.qualifier = qualifier
        self.imports = imports or {}
        self.type_params = type_params

    def render(self, node) -> str:
        return collapse_whitespace(self._render(node))

    def _render(self, node) -> str:
        if node.type == "type_identifier":
            return self._qualify(node_text(self.source_bytes, node))

        if node.type == "qualified_type":
            pkg = node_text(self.source_bytes, node.child_by_field_name("package"))
            name = node_text(self.source_bytes, node.child_by_field_name("name"))
            if pkg in self.imports:
                pkg = assumed_package_name(self.imports[pkg])
            return f"{pkg}.{name}"

        if node.type in ("interface_type", "struct_type"):
            return self._render_inline(node)

        if node.type == "comment":
            return ""

        if node.child_count == 0:
            return node_text(self.source_bytes, node)

        # Keep the text between children (punctuation, spacing) as written
        parts = []
        cursor = node.start_byte
        for child in node.children:
            parts.append(self.source_bytes[cursor:child.start_byte].decode("utf-8", errors="replace"))
            parts.append(self._render(child))
            cursor = child.end_byte
        parts.append(self.source_bytes[cursor:node.end_byte].decode("utf-8", errors="replace"))
        return "".join(parts)

    def _render_inline(self, node) -> str:
        """interface{...} and struct{...} literals, on one line."""
        keyword = "interface" if node.type == "interface_type" else "struct"
        elems = named_children(node)
        if keyword == "struct":
            # struct_type -> field_declaration_list -> field_declaration*
            elems = [e for lst in elems for e in named_children(lst)]
        inner = "; ".join(collapse_whitespace(self._render(e)) for e in elems)
        return f"{keyword}{{{inner}}}"

    def _qualify(self, name: str) -> str:
        if not self.qualifier or name in PREDECLARED_TYPES or name in self.type_params:
            return name
        return f"{self.qualifier}.{name}"
