import json
import os
import shutil
import tempfile

import pytest

from translation_extractor.providers import SnapshotRecordSourceProvider


def snapshot_source(locale, entries, package=None, namespace=None, kind=None, error=None):
    """Build one source record for a snapshot."""
    source = {"locale": locale, "entries": dict(entries)}
    if package or namespace or kind:
        source["origin"] = {"package": package, "namespace": namespace, "kind": kind}
    if error:
        source["error"] = error
    return source


@pytest.fixture
def output_root():
    """Function-scoped temporary output directory, removed after each test."""
    temp_dir = tempfile.mkdtemp(prefix="extractor_out_")
    root = os.path.join(temp_dir, "translations")
    os.makedirs(root)
    yield root
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def make_provider():
    """Factory for snapshot-backed providers."""
    def _make(sources, active=None):
        return SnapshotRecordSourceProvider(sources, active)
    return _make


@pytest.fixture
def write_json():
    def _write(path, payload):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            if isinstance(payload, str):
                f.write(payload)
            else:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        return path
    return _write


@pytest.fixture
def read_json():
    def _read(path):
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    return _read


@pytest.fixture
def make_source():
    return snapshot_source
