"""Тесты детерминированного ключа кэша."""

import os
import subprocess
import sys
from pathlib import Path

import qrbit
from qrbit.enums import RasterFormat
from qrbit.fingerprint import FINGERPRINT_VERSION, fingerprint, fingerprint_document
from qrbit.models import RenderPathTag
from qrbit.request import RenderRequest


def _key(request: RenderRequest, tag: str = "vector-svg") -> str:
    return fingerprint(request.snapshot(), tag)


def test_fingerprint_is_hex_sha256() -> None:
    key = _key(RenderRequest("hello"))
    assert len(key) == 64
    int(key, 16)


def test_equal_requests_share_key() -> None:
    assert _key(RenderRequest("hello", size=300)) == _key(RenderRequest("hello", size=300))


def test_cache_flag_is_not_part_of_key() -> None:
    assert _key(RenderRequest("hello", cache=False)) == _key(RenderRequest("hello"))


def test_every_output_field_changes_key() -> None:
    base = _key(RenderRequest("hello"))
    variants = [
        RenderRequest("hello!"),
        RenderRequest("hello", size=201),
        RenderRequest("hello", margin=None),
        RenderRequest("hello", margin=0),
        RenderRequest("hello", logo="logo.png"),
        RenderRequest("hello", logo_size_ratio=0.25),
        RenderRequest("hello", background_color="#FFFFFE"),
        RenderRequest("hello", foreground_color="navy"),
        RenderRequest("hello", error_correction="H"),
    ]
    keys = {_key(r) for r in variants}
    assert base not in keys
    assert len(keys) == len(variants)


def test_path_tag_isolates_outputs() -> None:
    snapshot = RenderRequest("hello").snapshot()
    tags = [
        RenderPathTag.VECTOR_SVG,
        RenderPathTag.raster(RasterFormat.PNG),
        RenderPathTag.raster(RasterFormat.JPEG, 90),
        RenderPathTag.raster(RasterFormat.JPEG, 60),
        RenderPathTag.raster(RasterFormat.WEBP, 90),
    ]
    assert len({fingerprint(snapshot, t) for t in tags}) == len(tags)


def test_buffer_logo_keyed_by_content() -> None:
    a = _key(RenderRequest("hello", logo=b"abc"))
    b = _key(RenderRequest("hello", logo=bytearray(b"abc")))
    c = _key(RenderRequest("hello", logo=b"abd"))
    assert a == b
    assert a != c


def test_error_correction_spellings_share_key() -> None:
    assert _key(RenderRequest("x", error_correction="H")) == _key(
        RenderRequest("x", error_correction="high")
    )


def test_document_layout() -> None:
    doc = fingerprint_document(RenderRequest("hi").snapshot(), "raster-png")
    assert doc["v"] == FINGERPRINT_VERSION
    assert doc["path"] == "raster-png"
    assert doc["logo"] is None
    assert doc["error_correction"] == "medium"


_KEY_SCRIPT = """
from qrbit.fingerprint import fingerprint
from qrbit.request import RenderRequest

request = RenderRequest(
    "stable across processes",
    size=320,
    margin=None,
    logo=b"\\x89PNG logo bytes",
    error_correction="Q",
    foreground_color="navy",
)
print(fingerprint(request.snapshot(), "raster-jpeg:75"))
"""


def _key_in_subprocess(hash_seed: str) -> str:
    src_dir = Path(qrbit.__file__).resolve().parent.parent
    env = dict(os.environ)
    env["PYTHONHASHSEED"] = hash_seed
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(src_dir), env.get("PYTHONPATH", "")) if p
    )
    completed = subprocess.run(
        [sys.executable, "-c", _KEY_SCRIPT],
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout.strip().splitlines()[-1]


def test_key_is_stable_across_processes() -> None:
    in_process = fingerprint(
        RenderRequest(
            "stable across processes",
            size=320,
            margin=None,
            logo=b"\x89PNG logo bytes",
            error_correction="Q",
            foreground_color="navy",
        ).snapshot(),
        "raster-jpeg:75",
    )
    keys = {_key_in_subprocess(seed) for seed in ("0", "1", "4242")}
    assert keys == {in_process}
