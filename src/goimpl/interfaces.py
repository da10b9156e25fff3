# --- Interface extraction ----------------------------------------------------
import logging
from typing import Optional

from goimpl.errors import NotFoundError, NotInterfaceError
from goimpl.models.ast_models import (
    Declaration, DeclKind, EmbedRef, Func, InterfaceDecl, Package, Param,
)
from goimpl.tree_sitter_helpers import field_names, named_children, node_text
from goimpl.types_render import PREDECLARED_TYPES, TypeRenderer

logger = logging.getLogger(__name__)

# Interfaces Go declares in the universe scope, by the methods they contribute
PREDECLARED_INTERFACES: dict[str, tuple[Func, ...]] = {
    "error": (Func(name="Error", results=(Param(type="string"),)),),
    "any": (),
    "comparable": (),
}

# Node names differ between tree-sitter-go grammar versions
METHOD_NODES = ("method_elem", "method_spec")
EMBED_NODES = ("type_elem", "interface_type_name", "constraint_elem")
NAMED_TYPE_NODES = ("type_identifier", "qualified_type", "generic_type")


def find_interface_decl(pkg: Package, identifier: str) -> InterfaceDecl:
    """
    Looks `identifier` up in `pkg` and returns its interface declaration,
    unflattened.

    Aliases and defined types whose right-hand side is a named type
    (`type RW = io.ReadWriter`, `type Conn net.Conn`) come back as an
    interface embedding that type; the flattener checks it is an interface.
    """
    decl = pkg.lookup(identifier)
    if decl is None:
        raise NotFoundError(pkg.path, identifier)

    if decl.kind is DeclKind.INTERFACE:
        return _build_interface(pkg, decl, decl.node.child_by_field_name("type"))

    if decl.kind in (DeclKind.ALIAS, DeclKind.TYPE):
        type_node = decl.node.child_by_field_name("type")
        embed = None
        if type_node is not None and type_node.type in NAMED_TYPE_NODES:
            embed = _embed_ref(pkg, decl, type_node, frozenset())
        if embed is not None:
            return InterfaceDecl(
                package_path=pkg.path,
                package_name=pkg.name,
                name=identifier,
                embeds=(embed,),
            )
    raise NotInterfaceError(pkg.path, identifier, decl.kind.value)


def _build_interface(pkg: Package, decl: Declaration, type_node) -> InterfaceDecl:
    type_params = _type_param_names(decl)
    renderer = TypeRenderer(
        decl.source,
        qualifier=pkg.name if pkg.path else "",
        imports=decl.imports,
        type_params=type_params,
    )

    methods: list[Func] = []
    embeds: list[EmbedRef] = []
    for elem in named_children(type_node):
        if elem.type in METHOD_NODES:
            methods.append(_method(decl.source, elem, renderer))
        elif elem.type in EMBED_NODES:
            embed = _embed_ref(pkg, decl, elem, type_params)
            if embed is not None:
                embeds.append(embed)

    logger.debug("%s.%s: %d methods, %d embeds", pkg.path, decl.name, len(methods), len(embeds))
    return InterfaceDecl(
        package_path=pkg.path,
        package_name=pkg.name,
        name=decl.name,
        methods=tuple(methods),
        embeds=tuple(embeds),
    )


def _type_param_names(decl: Declaration) -> frozenset[str]:
    params = decl.node.child_by_field_name("type_parameters")
    if params is None:
        return frozenset()
    names = set()
    for param in named_children(params):
        for name_node in field_names(param):
            names.add(node_text(decl.source, name_node))
    return frozenset(names)


def _method(source_bytes: bytes, elem, renderer: TypeRenderer) -> Func:
    name = node_text(source_bytes, elem.child_by_field_name("name"))
    params = _params(source_bytes, elem.child_by_field_name("parameters"), renderer)

    result = elem.child_by_field_name("result")
    if result is None:
        results: tuple[Param, ...] = ()
    elif result.type == "parameter_list":
        results = _params(source_bytes, result, renderer)
    else:
        results = (Param(type=renderer.render(result)),)
    return Func(name=name, params=params, results=results)


def _params(source_bytes: bytes, param_list, renderer: TypeRenderer) -> tuple[Param, ...]:
    """
    Expands a parameter_list: `a, b int` becomes two Params of type int.
    """
    if param_list is None:
        return ()
    params = []
    for decl in named_children(param_list):
        type_node = decl.child_by_field_name("type")
        if type_node is None:
            continue
        type_str = renderer.render(type_node)
        if decl.type == "variadic_parameter_declaration":
            type_str = "..." + type_str
        names = field_names(decl)
        if not names:
            params.append(Param(type=type_str))
        for name_node in names:
            params.append(Param(name=node_text(source_bytes, name_node), type=type_str))
    return tuple(params)


def _embed_ref(pkg: Package, decl: Declaration, elem, type_params: frozenset[str]) -> Optional[EmbedRef]:
    """
    The interface named by an embedded element, or None when the element
    contributes no methods (unions, ~T terms, type parameters).
    """
    if elem.type in NAMED_TYPE_NODES:
        node = elem
    else:
        terms = named_children(elem)
        if len(terms) != 1:
            return None
        node = terms[0]

    if node.type == "generic_type":
        # Embed the generic interface itself; type arguments are not substituted
        node = node.child_by_field_name("type")

    if node.type == "type_identifier":
        name = node_text(decl.source, node)
        if name in PREDECLARED_INTERFACES:
            return EmbedRef(package_path="", identifier=name, predeclared=True)
        if name in type_params or name in PREDECLARED_TYPES:
            return None
        return EmbedRef(package_path=pkg.path, identifier=name)

    if node.type == "qualified_type":
        alias = node_text(decl.source, node.child_by_field_name("package"))
        name = node_text(decl.source, node.child_by_field_name("name"))
        return EmbedRef(package_path=decl.imports.get(alias, alias), identifier=name)

    return None
