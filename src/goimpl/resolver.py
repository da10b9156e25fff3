# --- Package loading and caching ---------------------------------------------
import logging
import os
import threading
from concurrent.futures import Future
from typing import Callable, Optional

from goimpl.config import Settings
from goimpl.errors import PackageNotFoundError, PackageSyntaxError
from goimpl.indexer import GoIndexer
from goimpl.inputs.directory_scanning import (
    PackageLocator, go_source_files, is_ignored_source, read_text,
)
from goimpl.interfaces import find_interface_decl
from goimpl.models.ast_models import InterfaceDecl, Package, SourceFile

logger = logging.getLogger(__name__)


class PackageCache:
    """
    Loaded packages keyed by import path.

    Concurrent lookups of the same key share one load; failures are cached
    and re-raised to every caller like results.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, Future] = {}

    def get_or_load(self, key: str, loader: Callable[[], Package]) -> Package:
        with self._lock:
            future = self._entries.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._entries[key] = future

        if owner:
            try:
                future.set_result(loader())
            except Exception as e:
                future.set_exception(e)
            except BaseException as e:
                # Interrupted loads wake the waiters but are not cached
                with self._lock:
                    self._entries.pop(key, None)
                future.set_exception(e)
                raise
        else:
            logger.debug("package cache hit: %r", key)
        return future.result()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self):
        with self._lock:
            self._entries.clear()


class PackageResolver:
    """
    Loads Go packages from the configured search path and resolves interface
    declarations in them.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 indexer: Optional[GoIndexer] = None,
                 cache: Optional[PackageCache] = None):
        self.settings = settings or Settings.from_env()
        self.indexer = indexer or GoIndexer()
        self.cache = cache if cache is not None else PackageCache()
        self.locator = PackageLocator(self.settings)

    def load_package(self, path: str) -> Package:
        """
        Returns the package for an import path, short package name ("http")
        or "" for the local package. Raises LoadError.
        """
        return self.cache.get_or_load(path, lambda: self._locate_and_load(path))

    def resolve_interface(self, package_path: str, identifier: str) -> InterfaceDecl:
        return find_interface_decl(self.load_package(package_path), identifier)

    def _locate_and_load(self, path: str) -> Package:
        found = self.locator.locate(path)
        if found is None:
            raise PackageNotFoundError(path)
        import_path, directory = found
        if import_path != path:
            # Share one Package between the short name and the canonical path
            return self.cache.get_or_load(import_path, lambda: self._load(import_path, directory))
        return self._load(import_path, directory)

    def _load(self, import_path: str, directory: str) -> Package:
        """
        Parses every buildable file of the package directory and merges their
        declarations.
        """
        files: list[SourceFile] = []
        for file_path in go_source_files(directory, self.settings.goos, self.settings.goarch):
            source = read_text(file_path)
            if is_ignored_source(source):
                logger.debug("skipping %s: //go:build ignore", file_path)
                continue
            indexed = self.indexer.index_source(source, file_path)
            if indexed.has_error:
                raise PackageSyntaxError(import_path, file_path)
            if indexed.package_name is None or indexed.package_name.endswith("_test"):
                continue
            files.append(indexed)

        if not files:
            raise PackageNotFoundError(import_path)

        name = self._package_name(files, directory)
        declarations = {}
        for indexed in files:
            if indexed.package_name != name:
                logger.warning("ignoring %s: package %s, expected %s",
                               indexed.path, indexed.package_name, name)
                continue
            for decl in indexed.declarations:
                declarations.setdefault(decl.name, decl)

        logger.debug("loaded package %r (%s) from %s: %d declarations",
                     import_path, name, directory, len(declarations))
        return Package(path=import_path, name=name, directory=directory, declarations=declarations)

    def _package_name(self, files: list[SourceFile], directory: str) -> str:
        names = [f.package_name for f in files]
        base = os.path.basename(os.path.normpath(directory))
        if base in names:
            return base
        return names[0]
