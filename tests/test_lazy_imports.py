"""Tests for navcache.__init__ — lazy import registry covers all public names."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

import navcache

SRC = Path(navcache.__file__).resolve().parent.parent


def _run(code: str) -> None:
    """Run *code* in a fresh interpreter so sys.modules starts empty."""
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(SRC), os.environ.get("PYTHONPATH")]))}
    subprocess.run([sys.executable, "-c", code], check=True, env=env)


@pytest.mark.parametrize("name", navcache.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(navcache, name)
    assert obj is not None, f"navcache.{name} resolved to None"


def test_all_names_in_lazy_registry() -> None:
    """Every name in __all__ has a corresponding entry in _LAZY_IMPORTS."""
    missing = set(navcache.__all__) - set(navcache._LAZY_IMPORTS)
    assert not missing, (
        f"Names in __all__ but not in _LAZY_IMPORTS: {sorted(missing)}. "
        f"Add them to _LAZY_IMPORTS in navcache/__init__.py."
    )


def test_lazy_registry_no_extras() -> None:
    """Every name in _LAZY_IMPORTS should be in __all__ (public API contract)."""
    extras = set(navcache._LAZY_IMPORTS) - set(navcache.__all__)
    assert not extras, (
        f"Names in _LAZY_IMPORTS but not in __all__: {sorted(extras)}. "
        f"Either add them to __all__ or remove from _LAZY_IMPORTS."
    )


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        navcache.__getattr__("ThisDoesNotExist")


class TestHttpxStaysLazy:
    def test_package_import_skips_httpx(self) -> None:
        _run("import sys, navcache; assert 'httpx' not in sys.modules")

    def test_page_and_data_caches_skip_httpx(self) -> None:
        _run(
            "import sys, navcache\n"
            "navcache.PageCacheStore, navcache.GlobalDataCache, navcache.bind\n"
            "assert 'httpx' not in sys.modules"
        )

    def test_prefetcher_imports_httpx(self) -> None:
        _run("import sys, navcache\nnavcache.BackgroundPrefetcher\nassert 'httpx' in sys.modules")
