# --- Method set flattening ---------------------------------------------------
import logging
from typing import Callable

from goimpl.errors import EmbedCycleError
from goimpl.interfaces import PREDECLARED_INTERFACES
from goimpl.models.ast_models import EmbedRef, Func, InterfaceDecl

logger = logging.getLogger(__name__)

ResolveFn = Callable[[str, str], InterfaceDecl]


def flatten(decl: InterfaceDecl, resolve: ResolveFn) -> list[Func]:
    """
    Expands an interface into its full method set.

    Explicit methods come first in declaration order, then the methods of
    each embedded interface, depth-first in embed order. When a method name
    is reachable more than once the first occurrence wins. `resolve(path,
    identifier)` loads embedded interfaces; its errors propagate.
    """
    funcs: list[Func] = []
    seen: set[str] = set()
    expanding: list[tuple[str, str]] = []  # interfaces currently being expanded, outermost first

    def add(fn: Func):
        if fn.name not in seen:
            seen.add(fn.name)
            funcs.append(fn)

    def visit(current: InterfaceDecl):
        if current.key in expanding:
            chain = expanding[expanding.index(current.key):] + [current.key]
            raise EmbedCycleError([_display(key) for key in chain])
        expanding.append(current.key)

        for fn in current.methods:
            add(fn)
        for embed in current.embeds:
            if embed.predeclared:
                for fn in PREDECLARED_INTERFACES[embed.identifier]:
                    add(fn)
                continue
            visit(_resolve_embed(embed, resolve))

        expanding.pop()

    visit(decl)
    logger.debug("flattened %s: %d methods", decl, len(funcs))
    return funcs


def _resolve_embed(embed: EmbedRef, resolve: ResolveFn) -> InterfaceDecl:
    logger.debug("expanding embedded %s", embed)
    return resolve(embed.package_path, embed.identifier)


def _display(key: tuple[str, str]) -> str:
    path, name = key
    return f"{path}.{name}" if path else name
