import logging
from typing import Optional

from goimpl.flatten import flatten
from goimpl.models.ast_models import Func
from goimpl.reference import parse_reference
from goimpl.resolver import PackageResolver

logger = logging.getLogger(__name__)


def resolve_methods(reference: str, resolver: Optional[PackageResolver] = None) -> list[Func]:
    """
    Returns the full, ordered method set of the interface named by
    `reference`, e.g. "io.ReadWriter" or "net/http.Handler".

    Raises ParseError, LoadError, NotFoundError, NotInterfaceError or
    EmbedCycleError.
    """
    ref = parse_reference(reference)
    if resolver is None:
        resolver = PackageResolver()
    logger.debug("resolving %s", ref)
    decl = resolver.resolve_interface(ref.package_path, ref.identifier)
    return flatten(decl, resolver.resolve_interface)
