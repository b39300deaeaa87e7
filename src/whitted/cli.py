"""Command-line entry point for rendering sphere scenes.

Usage:
    whitted-render [options]
    python -m whitted [options]

Options:
    --scene NAME            Reference scene: showcase or supersampling
                            (default: showcase)
    --scene-file PATH       Load the spheres from a JSON scene file instead;
                            the camera is taken from --scene
    --width WIDTH           Image width in pixels (default: 512)
    --height HEIGHT         Image height in pixels (default: 512)
    --samples SAMPLES       Samples per pixel
    --jitter/--no-jitter    Jitter samples within the pixel
    --gamma-correct/--no-gamma-correct
                            Gamma correct the output image
    --ambient-always/--ambient-shadow-only
                            Add ambient light to lit points too, or only to
                            shadowed points
    --max-depth DEPTH       Bounce bound per primary ray (default: 100)
    --seed SEED             Random seed for jittered sampling (default: 0)
    --output OUTPUT         Output file path, .ppm or .png (default: output.ppm)
    --preview               Show the result in a Matplotlib window
    --quiet                 Suppress progress output
    --cpu                   Force the CPU backend

Sampling, gamma and ambient options default to the reference settings of
the chosen scene: one centered sample with gamma correction for showcase,
16 jittered samples without gamma for supersampling.

Example:
    whitted-render --scene supersampling --samples 4 --output ssaa.png
"""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence
from pathlib import Path

import taichi as ti

from whitted.core.options import MAX_DEPTH, RenderOptions

SCENE_CHOICES = ("showcase", "supersampling")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with a Whitted-style ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_CHOICES,
        default="showcase",
        help="Reference scene to render (default: showcase)",
    )
    parser.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="JSON scene file with the spheres to render",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Samples per pixel (default: from the scene preset)",
    )
    parser.add_argument(
        "--jitter",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Jitter samples within the pixel (default: from the scene preset)",
    )
    parser.add_argument(
        "--gamma-correct",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Gamma correct the output (default: from the scene preset)",
    )
    parser.add_argument(
        "--ambient-always",
        dest="ambient_always",
        action="store_true",
        default=None,
        help="Add the ambient term to lit points too",
    )
    parser.add_argument(
        "--ambient-shadow-only",
        dest="ambient_always",
        action="store_false",
        help="Add the ambient term to shadowed points only",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=MAX_DEPTH,
        help=f"Bounce bound per primary ray (default: {MAX_DEPTH})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for jittered sampling (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="output.ppm",
        help="Output file path, .ppm or .png (default: output.ppm)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )

    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> RenderOptions:
    """Build render options from the scene preset and explicit flags.

    Raises:
        ValueError: If any resulting option is invalid.
    """
    if args.scene == "supersampling":
        options = RenderOptions.supersampled(width=args.width, height=args.height)
    else:
        options = RenderOptions.single_sample(width=args.width, height=args.height)

    if args.samples is not None:
        options.sample_count = args.samples
    if args.jitter is not None:
        options.jitter_enabled = args.jitter
    if args.gamma_correct is not None:
        options.gamma_correct = args.gamma_correct
    if args.ambient_always is not None:
        options.ambient_always_added = args.ambient_always
    options.max_depth = args.max_depth

    options.validate()
    return options


def render_from_args(args: argparse.Namespace) -> Path:
    """Render the scene described by the arguments and save it.

    Taichi must already be initialized.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.camera.pinhole import setup_camera
    from whitted.core.renderer import Renderer
    from whitted.preview.display import show_preview
    from whitted.scene.default_scenes import create_scene

    quiet = args.quiet
    options = build_options(args)

    if not quiet:
        print(f"Creating {args.scene} scene ({options.width}x{options.height})...")
    scene, camera = create_scene(args.scene)
    if args.scene_file is not None:
        scene.load_json(args.scene_file)
        if not quiet:
            print(f"Loaded {scene.get_sphere_count()} spheres from {args.scene_file}")

    setup_camera(camera)

    renderer = Renderer(options)

    if not quiet:
        mode = "jittered" if options.jitter_enabled else "centered"
        print(f"Rendering {options.sample_count} {mode} samples per pixel...")

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (done / total) * 100 if total > 0 else 0
            print(
                f"\r  Progress: {done}/{total} rows ({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(args.output)
    renderer.save_image(output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if args.preview:
        show_preview(renderer)

    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    backend = "CPU"
    if args.cpu:
        ti.init(arch=ti.cpu, random_seed=args.seed)
    else:
        # Use GPU if available, fall back to CPU
        try:
            ti.init(arch=ti.gpu, random_seed=args.seed)
            backend = "GPU"
        except Exception:
            ti.init(arch=ti.cpu, random_seed=args.seed)
    if not args.quiet:
        print(f"Using {backend} backend")

    try:
        render_from_args(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
