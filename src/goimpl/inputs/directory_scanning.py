# --- Package directory lookup ------------------------------------------------
import logging
import os
import re
import threading
from typing import Optional

from goimpl.config import Settings

logger = logging.getLogger(__name__)

KNOWN_GOOS = frozenset({
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos", "ios",
    "js", "linux", "nacl", "netbsd", "openbsd", "plan9", "solaris", "wasip1",
    "windows", "zos",
})

KNOWN_GOARCH = frozenset({
    "386", "amd64", "amd64p32", "arm", "arm64", "arm64be", "armbe", "loong64",
    "mips", "mips64", "mips64le", "mips64p32", "mips64p32le", "mipsle", "ppc",
    "ppc64", "ppc64le", "riscv", "riscv64", "s390", "s390x", "sparc", "sparc64",
    "wasm",
})

# Directories never searched when looking a package up by its short name
SKIPPED_DIRS = frozenset({"internal", "vendor", "testdata", "cmd"})

_BUILD_LINE_RE = re.compile(r"^//go:build\s+(.*)$", re.MULTILINE)
_SEMVER_RE = re.compile(r"v(\d+)\.(\d+)\.(\d+)(.*)\Z")
_PACKAGE_CLAUSE_RE = re.compile(r"^package\s", re.MULTILINE)


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def matches_platform(filename: str, goos: str, goarch: str) -> bool:
    """
    Applies Go's filename constraints: name_GOOS.go, name_GOARCH.go and
    name_GOOS_GOARCH.go only build on the matching platform.
    """
    stem = filename[:-len(".go")] if filename.endswith(".go") else filename
    parts = stem.split("_")
    if len(parts) >= 3 and parts[-2] in KNOWN_GOOS and parts[-1] in KNOWN_GOARCH:
        return parts[-2] == goos and parts[-1] == goarch
    if len(parts) >= 2:
        if parts[-1] in KNOWN_GOOS:
            return parts[-1] == goos
        if parts[-1] in KNOWN_GOARCH:
            return parts[-1] == goarch
    return True


def is_ignored_source(source: str) -> bool:
    """
    True for files excluded with a `//go:build ignore` constraint.

    Only `ignore` on its own or as a term of a plain `&&` conjunction counts.
    Expressions with `||` are not evaluated and keep the file.
    """
    clause = _PACKAGE_CLAUSE_RE.search(source)
    header = source[:clause.start()] if clause else source
    for m in _BUILD_LINE_RE.finditer(header):
        expr = m.group(1)
        if "||" in expr:
            continue
        if "ignore" in re.split(r"[\s()&]+", expr):
            return True
    return False



def go_source_files(directory: str, goos: str, goarch: str) -> list[str]:
    """
    Lists the non-test .go files of a package directory, sorted by name.
    """
    try:
        names = sorted(os.listdir(directory))
    except OSError:
        return []
    files = []
    for fn in names:
        if not fn.endswith(".go") or fn.endswith("_test.go") or fn[0] in "._":
            continue
        if not matches_platform(fn, goos, goarch):
            logger.debug("skipping %s: built for another platform", fn)
            continue
        full = os.path.join(directory, fn)
        if os.path.isfile(full):
            files.append(full)
    return files


def _has_go_files(directory: str) -> bool:
    try:
        return any(
            fn.endswith(".go") and not fn.endswith("_test.go")
            for fn in os.listdir(directory)
        )
    except OSError:
        return False


def escape_module_path(path: str) -> str:
    """Module cache case-encoding: "Azure" -> "!azure"."""
    return "".join(f"!{c.lower()}" if c.isupper() else c for c in path)


def _version_key(version: str) -> tuple:
    m = _SEMVER_RE.match(version)
    if m is None:
        return (-1, -1, -1, False, version)
    major, minor, patch, rest = m.groups()
    # A release sorts above its pre-releases
    return (int(major), int(minor), int(patch), not rest.startswith("-"), rest)


class PackageLocator:
    """
    Maps import paths to package directories using the configured source
    roots and module cache.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._short_names: Optional[dict[str, list[tuple[str, str]]]] = None  # name -> [(import path, dir)]
        self._lock = threading.Lock()

    def locate(self, import_path: str) -> Optional[tuple[str, str]]:
        """
        Returns (canonical import path, directory), or None when no package
        directory matches.
        """
        if not import_path:
            directory = self.settings.local_dir
            return ("", directory) if _has_go_files(directory) else None

        for root in self.settings.source_roots():
            directory = os.path.join(root, *import_path.split("/"))
            if _has_go_files(directory):
                logger.debug("found %s in %s", import_path, root)
                return (import_path, directory)

        directory = self._in_module_cache(import_path)
        if directory is not None:
            return (import_path, directory)

        if "/" not in import_path:
            candidates = self._short_name_index().get(import_path)
            if candidates:
                # Shortest import path wins, e.g. "net/http" over "x/y/net/http"
                best = min(candidates, key=lambda c: (c[0].count("/"), c[0]))
                logger.debug("short name %s resolved to %s", import_path, best[0])
                return best
        return None

    def _in_module_cache(self, import_path: str) -> Optional[str]:
        modcache = self.settings.gomodcache
        if not modcache or not os.path.isdir(modcache):
            return None
        parts = import_path.split("/")
        escaped = escape_module_path(import_path).split("/")
        # Longest module path first: a/b/c@v, then a/b@v + /c, ...
        for i in range(len(parts), 0, -1):
            parent = os.path.join(modcache, *escaped[:i - 1])
            prefix = escaped[i - 1] + "@"
            try:
                versions = [e[len(prefix):] for e in os.listdir(parent) if e.startswith(prefix)]
            except OSError:
                continue
            for version in sorted(versions, key=_version_key, reverse=True):
                directory = os.path.join(parent, prefix + version, *parts[i:])
                if _has_go_files(directory):
                    logger.debug("found %s in module cache at %s", import_path, directory)
                    return directory
        return None

    def _short_name_index(self) -> dict[str, list[tuple[str, str]]]:
        with self._lock:
            if self._short_names is None:
                self._short_names = self._build_short_name_index()
            return self._short_names

    def _build_short_name_index(self) -> dict[str, list[tuple[str, str]]]:
        """
        Recursively indexes every package directory under the source roots by
        its last path element.
        """
        index: dict[str, list[tuple[str, str]]] = {}
        for root in self.settings.source_roots():
            if not os.path.isdir(root):
                continue
            for dirpath, dirnames, filenames in os.walk(root):
                dirnames[:] = sorted(
                    d for d in dirnames if d not in SKIPPED_DIRS and d[0] not in "._"
                )
                if dirpath == root:
                    continue
                if not any(fn.endswith(".go") and not fn.endswith("_test.go") for fn in filenames):
                    continue
                rel = os.path.relpath(dirpath, root).replace(os.sep, "/")
                index.setdefault(rel.rsplit("/", 1)[-1], []).append((rel, dirpath))
        logger.debug("indexed %d short package names", len(index))
        return index
