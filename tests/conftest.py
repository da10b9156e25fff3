import os

import pytest

from goimpl.config import Settings
from goimpl.indexer import GoIndexer
from goimpl.resolver import PackageResolver

TESTDATA = os.path.join(os.path.dirname(os.path.abspath(__file__)), "testdata")


@pytest.fixture(scope="session")
def settings() -> Settings:
    gopath = os.path.join(TESTDATA, "gopath")
    return Settings(
        goroot=os.path.join(TESTDATA, "goroot"),
        gopath=(gopath,),
        gomodcache=os.path.join(gopath, "pkg", "mod"),
        local_dir=os.path.join(TESTDATA, "local"),
        goos="linux",
        goarch="amd64",
    )


@pytest.fixture(scope="session")
def indexer() -> GoIndexer:
    return GoIndexer()


@pytest.fixture
def resolver(settings, indexer) -> PackageResolver:
    return PackageResolver(settings=settings, indexer=indexer)
