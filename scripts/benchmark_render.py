#!/usr/bin/env python3
"""Visual comparison: cold render vs cache hit, per render path."""

import asyncio
import sys
import time
from io import BytesIO
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root / "src"))

from PIL import Image

from qrbit import MemoryCacheStore, QrPipeline, RenderRequest, get_logger

logger = get_logger(__name__)

TEXT = "https://example.com/benchmark?id=0123456789"
ROUNDS = 20


def make_logo_bytes() -> bytes:
    buf = BytesIO()
    Image.new("RGBA", (64, 64), (200, 30, 30, 255)).save(buf, format="PNG")
    return buf.getvalue()


async def time_operation(pipeline: QrPipeline, request: RenderRequest, name: str) -> float:
    operation = getattr(pipeline, f"render_{name}")
    start = time.perf_counter()
    for _ in range(ROUNDS):
        await operation(request)
    return (time.perf_counter() - start) * 1000 / ROUNDS


async def benchmark_path(label: str, logo: object) -> dict:
    """Benchmark every output format with and without caching."""
    print(f"⏱️  Benchmarking {label}...")
    results: dict = {}
    for name in ("svg", "png", "jpeg", "webp"):
        cold = await time_operation(
            QrPipeline(), RenderRequest(TEXT, logo=logo, cache=False), name
        )
        warm_pipeline = QrPipeline(cache=MemoryCacheStore())
        warm_request = RenderRequest(TEXT, logo=logo)
        await getattr(warm_pipeline, f"render_{name}")(warm_request)
        warm = await time_operation(warm_pipeline, warm_request, name)
        results[name] = {"cold": cold, "warm": warm}
        logger.info("%s %s: cold %.3f ms, warm %.3f ms", label, name, cold, warm)
    return results


def print_table(label: str, results: dict) -> None:
    slowest = max(r["cold"] for r in results.values()) or 1.0
    print(f"🖼️  {label}")
    for name, r in results.items():
        bar = "█" * max(1, int(r["cold"] / slowest * 40))
        speedup = r["cold"] / r["warm"] if r["warm"] else float("inf")
        print(f"   {name:5s} cold: {r['cold']:8.3f} ms  {bar}")
        print(f"   {name:5s} hit:  {r['warm']:8.3f} ms  ⚡ {speedup:,.0f}x faster")
    print()


def print_comparison() -> None:
    """Print visual comparison."""
    print()
    print("=" * 70)
    print("📊 QR RENDER BENCHMARK")
    print("=" * 70)
    print()

    vector = asyncio.run(benchmark_path("vector path (no logo)", None))
    engine = asyncio.run(benchmark_path("engine path (buffer logo)", make_logo_bytes()))

    print()
    print_table("Direct vector path", vector)
    print_table("Engine path with logo", engine)

    overhead = engine["svg"]["cold"] / vector["svg"]["cold"] if vector["svg"]["cold"] else 0
    print(f"💡 Logo compositing costs {overhead:.1f}x the direct vector SVG")
    print()


if __name__ == "__main__":
    print_comparison()
