"""
Command-line interface for fractal diving.

``fractal-dive dive`` runs a seeded dive and saves the final image, and
``fractal-dive render`` renders one fixed view with the flame palette.
"""

import logging
import sys
import time
from pathlib import Path

import click

from .. import __version__
from ..api import Generator
from ..config import DiveConfig, is_power_of_four, parse_dimensions
from ..core.camera import Camera
from ..core.fractal_types import create_fractal
from ..rendering.compositor import compose
from ..rendering.image_output import ImageExporter, RenderMetadata, debug_snapshot_path

logger = logging.getLogger(__name__)


def _parse_pair(text: str, what: str):
    try:
        parts = [float(x.strip()) for x in text.split(',')]
    except ValueError:
        parts = []
    if len(parts) != 2:
        raise click.BadParameter(f"Invalid {what}. Use 'real,imag'")
    return parts[0], parts[1]


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='JSON configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    Fractal Dive - dive into Mandelbrot and Julia sets.

    Picks a fractal from a date seed, zooms toward edges of the set a random
    number of times and renders a supersampled final image.
    """
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"Fractal Dive v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            sys.exit(0)

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose


@main.command()
@click.option('--date-seed', help='ISO 8601 date used as seed, rounded down to the hour (default: now)')
@click.option('--antialiasing', type=int, help='Supersampling factor of the final image (a power of 4)')
@click.option('--dive-dimensions', help='Dimensions used while diving, e.g. 800x600')
@click.option('--shot-dimensions', help='Dimensions of the final image, e.g. 1024x768')
@click.option('--no-debug-images', is_flag=True, help='Do not save an image per dive iteration')
@click.option('--output', '-o', type=click.Path(), help='Final image path')
@click.option('--debug-dir', type=click.Path(), help='Directory for debug images')
@click.option('--workers', type=int, help='Number of rendering threads')
@click.pass_context
def dive(ctx, date_seed, antialiasing, dive_dimensions, shot_dimensions,
         no_debug_images, output, debug_dir, workers):
    """
    Dive into a fractal chosen from the date seed and save the final image.
    """
    try:
        config_file = ctx.obj.get('config_file')
        config = DiveConfig.load(config_file) if config_file else DiveConfig()

        # Command-line overrides
        if date_seed is not None:
            config.date_seed = date_seed
        if antialiasing is not None:
            config.antialiasing = antialiasing
        if dive_dimensions is not None:
            config.dive_dimensions = parse_dimensions(dive_dimensions)
        if shot_dimensions is not None:
            config.shot_dimensions = parse_dimensions(shot_dimensions)
        if no_debug_images:
            config.debug_images = False
        if output is not None:
            config.output = output
        if debug_dir is not None:
            config.debug_dir = debug_dir
        if workers is not None:
            config.workers = workers

        config.validate()

        seed_date = config.resolve_date_seed()
        click.echo(f"Date seed: {seed_date.isoformat()}")

        exporter = ImageExporter()

        def save_snapshot(index, raster):
            exporter.save_image(raster, debug_snapshot_path(config.debug_dir, index))

        if config.debug_images:
            Path(config.debug_dir).mkdir(parents=True, exist_ok=True)

        generator = Generator.from_config(config, snapshot_sink=save_snapshot)

        start_time = time.time()
        info, image = generator.generate()
        click.echo(str(info))

        metadata = RenderMetadata.from_info(info, config.shot_dimensions, config.antialiasing)
        exporter.save_image(image, config.output, metadata)
        click.echo(f"Dive complete: {time.time() - start_time:.2f}s")
        click.echo(f"Saved: {config.output}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
        sys.exit(1)


@main.command()
@click.argument('fractal_type', type=click.Choice(['mandelbrot', 'julia']))
@click.argument('output', type=click.Path())
@click.option('--center', default='0,0', help='View center "real,imag"')
@click.option('--zoom', type=float, default=1.0, help='View scale, smaller is deeper')
@click.option('--julia-c', default='0,0', help='Julia delta "real,imag" added to (0.3, 0.5)')
@click.option('--dimensions', default='800x600', help='Image dimensions, e.g. 800x600')
@click.option('--antialiasing', type=int, default=4, help='Supersampling factor (a power of 4)')
@click.option('--workers', type=int, help='Number of rendering threads')
@click.pass_context
def render(ctx, fractal_type, output, center, zoom, julia_c, dimensions, antialiasing, workers):
    """
    Render a single view of a fractal.

    FRACTAL_TYPE: Type of fractal (mandelbrot, julia)
    OUTPUT: Output image file path
    """
    try:
        width, height = parse_dimensions(dimensions)
        if not is_power_of_four(antialiasing):
            raise click.BadParameter("The specified antialiasing must be a power of four")
        if zoom <= 0:
            raise click.BadParameter("zoom must be positive")

        center_re, center_im = _parse_pair(center, 'center')
        dx, dy = _parse_pair(julia_c, 'Julia constant')

        fractal = create_fractal(fractal_type, dx, dy)
        camera = Camera((float(width), float(height)), complex(center_re, center_im), zoom)

        click.echo(f"Rendering {fractal.get_description()}...")
        start_time = time.time()
        image = compose(fractal, camera, (width, height), antialiasing, workers=workers)

        metadata = RenderMetadata(
            fractal_type=fractal.name,
            center=(center_re, center_im),
            zoom=zoom,
            resolution=(width, height),
            antialiasing=antialiasing,
            fractal_parameters=fractal.to_dict(),
        )
        ImageExporter().save_image(image, output, metadata)
        click.echo(f"Render complete: {time.time() - start_time:.2f}s")
        click.echo(f"Saved: {output}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
