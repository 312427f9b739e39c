#!/usr/bin/env python3
"""Render the silhouette of a sphere scene.

This script casts one ray per pixel from an eye point on the z axis through
a square wall, paints every pixel whose ray hits a sphere, and writes the
result as PPM or PNG.

Usage:
    python -m examples.render_silhouette [options]

Options:
    --width WIDTH       Image width in pixels (default: 200)
    --height HEIGHT     Image height in pixels (default: 200)
    --scene SCENE       JSON scene file (default: one unit sphere at the origin)
    --output OUTPUT     Output file path, .ppm or .png (default: output.ppm)
    --backend BACKEND   "taichi" (parallel kernels) or "python" (default: taichi)
    --batch-size SIZE   Columns per progress update (default: 20)
    --cpu               Force the Taichi CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_silhouette --width 400 --height 400 --output sphere.png
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the silhouette of a sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=200,
        help="Image width in pixels (default: 200)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=200,
        help="Image height in pixels (default: 200)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: one unit sphere at the origin)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="output.ppm",
        help="Output file path, .ppm or .png (default: output.ppm)",
    )
    parser.add_argument(
        "--backend",
        choices=("taichi", "python"),
        default="taichi",
        help="Ray casting backend (default: taichi)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=20,
        help="Columns per progress update (default: 20)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the Taichi CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_silhouette(
    width: int = 200,
    height: int = 200,
    scene_path: str | None = None,
    output_path: str = "output.ppm",
    backend: str = "taichi",
    batch_size: int = 20,
    quiet: bool = False,
) -> Path:
    """Render a scene silhouette and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        scene_path: Optional JSON scene file; a unit sphere is used if None.
        output_path: Output file path (.ppm or .png).
        backend: "taichi" or "python".
        batch_size: Number of columns to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # raykernel.scene.kernels allocates fields on import, so import after ti.init()
    from raykernel.core.renderer import RenderConfig, SilhouetteRenderer
    from raykernel.preview.export import save_canvas
    from raykernel.scene.manager import Scene

    if scene_path is not None:
        scene = Scene.load_json(scene_path)
    else:
        scene = Scene()
        scene.add_sphere()

    if not quiet:
        print(f"Rendering {scene.get_shape_count()} shape(s) at {width}x{height} ({backend})...")

    config = RenderConfig(width=width, height=height, batch_size=batch_size, backend=backend)
    renderer = SilhouetteRenderer(config)

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} columns ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    canvas = renderer.render(scene, callback=progress_callback)

    if not quiet:
        print()

    output_file = save_canvas(canvas, output_path)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Prefer a GPU backend; any init failure drops back to the CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_silhouette(
            width=args.width,
            height=args.height,
            scene_path=args.scene,
            output_path=args.output,
            backend=args.backend,
            batch_size=args.batch_size,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
