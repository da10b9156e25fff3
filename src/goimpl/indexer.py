import logging
import threading
from typing import Optional

from tree_sitter import Language, Node, Parser, Tree

from goimpl.models.ast_models import Declaration, DeclKind, SourceFile
from goimpl.tree_sitter_helpers import descendants_of_type, field_names, named_children, node_point, node_text
from goimpl.types_render import assumed_package_name

logger = logging.getLogger(__name__)


# --- Tree-sitter language loading -------------------------------------------

def load_go_language() -> Language:
    """
    Loads the Tree-sitter Go grammar from tree_sitter_language_pack, which
    bundles prebuilt grammars (no build step).
    """
    try:
        from tree_sitter_language_pack import get_language
    except ImportError as e:
        raise RuntimeError(
            "Could not load Go grammar.\n"
            "- Install `tree-sitter-language-pack` (pip install tree-sitter-language-pack)."
        ) from e
    return get_language("go")


# --- The Indexer -------------------------------------------------------------

class GoIndexer:
    """
    Walks a Tree-sitter Go AST to build the declaration table of one file:
    package clause, imports, and top-level types, funcs, consts and vars.
    Method declarations and function bodies are not indexed.
    """

    def __init__(self, language: Optional[Language] = None):
        self.language = language or load_go_language()
        self.parser = Parser(self.language)
        # Parser objects are not safe to share between threads
        self._lock = threading.Lock()

    def parse(self, source_bytes: bytes) -> Tree:
        """
        Parses a single source into a Tree-sitter tree.
        """
        with self._lock:
            return self.parser.parse(source_bytes)

    def index_source(self, source: str, file_path: Optional[str] = None) -> SourceFile:
        """
        Parses & indexes a Go source file.
        """
        source_bytes = source.encode("utf-8")
        tree: Tree = self.parse(source_bytes)
        root: Node = tree.root_node

        indexed = SourceFile(
            path=file_path,
            package_name=self._find_package(source_bytes, root),
            imports=self._find_imports(source_bytes, root),
            has_error=root.has_error,
        )
        if indexed.has_error:
            logger.debug("syntax error in %s", file_path or "<source>")

        for child in root.named_children:
            indexed.declarations.extend(self._declarations(source_bytes, child, indexed))
        return indexed

    # -- AST helpers ----------------------------------------------------------

    def _find_package(self, source_bytes: bytes, root: Node) -> Optional[str]:
        """
        Grabs the package name from the 'package_clause' node if present.
        """
        for child in root.children:
            if child.type == "package_clause":
                names = named_children(child)
                if names:
                    return node_text(source_bytes, names[0])
        return None

    def _find_imports(self, source_bytes: bytes, root: Node) -> dict[str, str]:
        """
        Maps each import name to its import path. Unnamed imports are keyed by
        the package name guessed from the path; dot and blank imports are dropped.
        """
        imports: dict[str, str] = {}
        for decl in root.children:
            if decl.type != "import_declaration":
                continue
            for spec in descendants_of_type(decl, ("import_spec",)):
                path_node = spec.child_by_field_name("path")
                if path_node is None:
                    continue
                path = node_text(source_bytes, path_node).strip("\"`")
                name_node = spec.child_by_field_name("name")
                if name_node is None:
                    imports[assumed_package_name(path)] = path
                elif name_node.type == "package_identifier":
                    imports[node_text(source_bytes, name_node)] = path
        return imports

    def _declarations(self, source_bytes: bytes, node: Node, indexed: SourceFile) -> list[Declaration]:
        """
        Declarations introduced by one top-level node.
        """
        found: list[tuple[str, DeclKind, Node]] = []

        if node.type == "type_declaration":
            for spec in named_children(node):
                name_node = spec.child_by_field_name("name")
                if name_node is None:
                    continue
                found.append((node_text(source_bytes, name_node), self._type_kind(spec), spec))

        elif node.type == "function_declaration":
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                found.append((node_text(source_bytes, name_node), DeclKind.FUNC, node))

        elif node.type in ("const_declaration", "var_declaration"):
            kind = DeclKind.CONST if node.type == "const_declaration" else DeclKind.VAR
            for spec in descendants_of_type(node, ("const_spec", "var_spec")):
                for name_node in field_names(spec):
                    found.append((node_text(source_bytes, name_node), kind, spec))

        decls = []
        for name, kind, spec in found:
            line, col = node_point(spec)
            decls.append(Declaration(
                name=name,
                kind=kind,
                file_path=indexed.path,
                line=line,
                col=col,
                imports=indexed.imports,
                node=spec,
                source=source_bytes,
            ))
        return decls

    def _type_kind(self, spec: Node) -> DeclKind:
        type_node = spec.child_by_field_name("type")
        # An alias of an interface literal denotes an interface type
        if type_node is not None and type_node.type == "interface_type":
            return DeclKind.INTERFACE
        if spec.type == "type_alias":
            return DeclKind.ALIAS
        if type_node is not None and type_node.type == "struct_type":
            return DeclKind.STRUCT
        return DeclKind.TYPE
