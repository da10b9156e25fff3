# --- Search path configuration ----------------------------------------------
import logging
import os
import platform
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

_GOOS_BY_PLATFORM = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
}

_GOARCH_BY_MACHINE = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


@dataclass(frozen=True)
class Settings:
    """
    Where Go packages are looked up.

    Source roots are directories laid out like GOROOT/src: a package with
    import path "a/b" lives in <root>/a/b.
    """
    goroot: Optional[str] = None
    gopath: tuple[str, ...] = ()
    gomodcache: Optional[str] = None
    extra_paths: tuple[str, ...] = ()
    local_dir: str = "."
    goos: str = "linux"
    goarch: str = "amd64"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Reads GOROOT, GOPATH, GOMODCACHE, GOOS, GOARCH and GOIMPL_PATH.
        GOROOT falls back to `go env GOROOT` when a go binary is on PATH.
        """
        env = os.environ if environ is None else environ

        goroot = env.get("GOROOT") or _go_env("GOROOT")
        gopath = tuple(p for p in env.get("GOPATH", "").split(os.pathsep) if p)
        if not gopath:
            gopath = (os.path.join(os.path.expanduser("~"), "go"),)
        gomodcache = env.get("GOMODCACHE") or os.path.join(gopath[0], "pkg", "mod")
        extra = tuple(p for p in env.get("GOIMPL_PATH", "").split(os.pathsep) if p)

        settings = cls(
            goroot=goroot,
            gopath=gopath,
            gomodcache=gomodcache,
            extra_paths=extra,
            local_dir=os.getcwd(),
            goos=env.get("GOOS") or _GOOS_BY_PLATFORM.get(sys.platform, sys.platform),
            goarch=env.get("GOARCH") or _GOARCH_BY_MACHINE.get(platform.machine().lower(), "amd64"),
        )
        logger.debug("settings from environment: %s", settings)
        return settings

    def source_roots(self) -> list[str]:
        """Extra paths first, then GOROOT/src, then each GOPATH/src."""
        roots = list(self.extra_paths)
        if self.goroot:
            roots.append(os.path.join(self.goroot, "src"))
        roots.extend(os.path.join(p, "src") for p in self.gopath)
        return roots


def _go_env(name: str) -> Optional[str]:
    go = shutil.which("go")
    if go is None:
        return None
    try:
        proc = subprocess.run(
            [go, "env", name], capture_output=True, text=True, timeout=30, check=False
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("`go env %s` failed: %s", name, e)
        return None
    value = proc.stdout.strip()
    return value or None
