"""
Command-Line Interface
======================

Single responsibility: Inspect and convert geometry files from the shell.
"""

import sys
from pathlib import Path

import click

from geometry_io.config import IOConfig
from geometry_io.core.dispatch import read_object, write_object
from geometry_io.core.exceptions import GeometryIOError
from geometry_io.core.validator import validate_input_file
from geometry_io.utils.logging import get_logger, setup_logger

logger = get_logger(__name__)


def _build_config(no_textures: bool, text_ply: bool) -> IOConfig:
    return IOConfig(load_textures=not no_textures, ply_binary=not text_ply)


def _fail(message: str) -> None:
    click.secho(f"\n✗ {message}", fg='red', bold=True, err=True)
    sys.exit(1)


@click.group()
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Logging level (default: INFO)'
)
@click.option(
    '-q', '--quiet',
    is_flag=True,
    help='Suppress log output'
)
def cli(log_level, quiet):
    """Read, inspect and convert PLY, OBJ and PTX geometry files."""
    setup_logger(name='geometry_io', verbose=not quiet, log_level=log_level)


@cli.command()
@click.argument('path', type=click.Path(path_type=Path))
@click.option('--no-textures', is_flag=True, help='Skip material texture sampling')
def info(path, no_textures):
    """
    Print a summary of a geometry file.

    \b
    Examples:
        geometry-io info scan.ptx
        geometry-io info bunny.obj --no-textures
    """
    try:
        validate_input_file(path)
        config = _build_config(no_textures, False)
        mesh = read_object(path, config=config)
    except GeometryIOError as e:
        _fail(str(e))

    colored = sum(1 for v in mesh.vertices if v.has_color)

    click.echo(f"File:       {path}")
    click.echo(f"Vertices:   {len(mesh.vertices):,}")
    click.echo(f"Faces:      {len(mesh.faces):,}")
    click.echo(f"Normals:    {len(mesh.normals):,}")
    click.echo(f"Texcoords:  {len(mesh.tex_coords):,}")
    click.echo(f"Materials:  {len(mesh.materials):,}")
    click.echo(f"Colored:    {colored:,}")
    for warning in mesh.warnings:
        click.secho(f"Warning:    {warning}", fg='yellow')


@cli.command()
@click.argument('input_path', type=click.Path(path_type=Path))
@click.argument('output_path', type=click.Path(path_type=Path))
@click.option('--no-textures', is_flag=True, help='Skip material texture sampling')
@click.option('--text-ply', is_flag=True, help='Write ASCII instead of binary PLY')
def convert(input_path, output_path, no_textures, text_ply):
    """
    Convert INPUT_PATH and save it near OUTPUT_PATH.

    Meshes with faces are written as OBJ, point clouds as PLY; the extension
    of OUTPUT_PATH is rewritten accordingly.

    \b
    Examples:
        geometry-io convert scan.ptx scan.ply
        geometry-io convert bunny.obj out/bunny.obj
    """
    try:
        validate_input_file(input_path)
        config = _build_config(no_textures, text_ply)
        mesh = read_object(input_path, config=config)
        written = write_object(output_path, mesh, config=config)
    except GeometryIOError as e:
        _fail(str(e))

    click.secho(f"✓ Wrote {written}", fg='green')


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == '__main__':
    main()
