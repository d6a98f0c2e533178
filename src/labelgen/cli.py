"""CLI interface for the label renderer."""

import logging
from pathlib import Path

import click

from labelgen.api.builder import configure, render
from labelgen.config import DEFAULT_STYLE_NAME, load_config
from labelgen.errors import LabelgenError
from labelgen.fonts import registered_fonts
from labelgen.render.image import save_image
from labelgen.utils.geometry import ANCHOR_FRACTIONS


def _parse_offset(ctx: click.Context, param: click.Parameter, value: str | None) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        x_str, y_str = value.split(",")
        return (int(x_str.strip()), int(y_str.strip()))
    except ValueError:
        raise click.BadParameter(f"expected 'X,Y' integers, got '{value}'")


@click.group()
@click.version_option()
@click.option("-v", "--verbose", is_flag=True, help="Log font resolution and render details.")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to labelgen.toml. Defaults to ./labelgen.toml if present.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config: Path | None) -> None:
    """Render text labels as map-marker icons."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    # Register configured fonts at startup
    configure(cfg)
    ctx.obj = cfg


@main.command("render")
@click.argument("text")
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    default=Path("label.png"),
    show_default=True,
    help="Output PNG file path.",
)
@click.option(
    "--style",
    "style_name",
    default=DEFAULT_STYLE_NAME,
    show_default=True,
    help="Named style preset from the config file.",
)
@click.option("--font", "fonts", multiple=True, help="Font name, repeat for fallbacks (e.g. --font Roboto:700).")
@click.option("--size", type=int, help="Text size in pixels.")
@click.option("--color", help="Fill color as #RRGGBB or #RRGGBBAA.")
@click.option("--opacity", type=float, help="Fill opacity from 0.0 to 1.0.")
@click.option("--halo-color", help="Halo color as #RRGGBB or #RRGGBBAA.")
@click.option("--halo-width", type=int, help="Halo width in pixels (0 disables).")
@click.option("--halo-blur", type=float, help="Halo fade-out distance in pixels.")
@click.option("--max-width", type=int, help="Wrap width in pixels (0 disables wrapping).")
@click.option("--line-height", type=int, help="Line height in pixels (0 derives from size).")
@click.option(
    "--justify",
    type=click.Choice(["left", "center", "right"], case_sensitive=False),
    help="Line justification.",
)
@click.option(
    "--anchor",
    type=click.Choice(list(ANCHOR_FRACTIONS), case_sensitive=False),
    help="Part of the label placed on the map coordinate.",
)
@click.option("--rotation", type=float, help="Clockwise rotation in degrees (0-360).")
@click.option("--offset", callback=_parse_offset, help="Anchor offset as 'X,Y' pixels.")
@click.pass_obj
def render_command(
    cfg,
    text: str,
    output: Path,
    style_name: str,
    fonts: tuple[str, ...],
    size: int | None,
    color: str | None,
    opacity: float | None,
    halo_color: str | None,
    halo_width: int | None,
    halo_blur: float | None,
    max_width: int | None,
    line_height: int | None,
    justify: str | None,
    anchor: str | None,
    rotation: float | None,
    offset: tuple[int, int] | None,
) -> None:
    """
    Render TEXT to a PNG and print its anchor point.

    Use "\\n" inside TEXT for explicit line breaks.
    """
    try:
        base = cfg.style(style_name)

        # Build style with preset + CLI overrides
        overrides = {
            "size": size,
            "color": color,
            "opacity": opacity,
            "halo_color": halo_color,
            "halo_width": halo_width,
            "halo_blur": halo_blur,
            "max_width": max_width,
            "line_height": line_height,
            "justification": justify,
            "anchor": anchor,
            "rotation": rotation,
            "offset": offset,
        }
        style_updates = {key: value for key, value in overrides.items() if value is not None}
        if fonts:
            style_updates["fonts"] = fonts
        # Re-validate through the model so colors and choices are normalized
        style = type(base).model_validate({**base.model_dump(), **style_updates})

        result = render(text.replace("\\n", "\n"), style)
        save_image(result.image, output)

        click.echo(f"✓ Label saved to: {output} ({result.width}x{result.height}px)")
        click.echo(f"  Anchor: ({result.anchor.x:.1f}, {result.anchor.y:.1f})")

    except (LabelgenError, ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command("fonts")
def fonts_command() -> None:
    """List registered fonts."""
    fonts = registered_fonts()
    if not fonts:
        click.echo("No registered fonts. The system default font is used.")
        return
    for name, path in sorted(fonts.items()):
        click.echo(f"{name}\t{path}")


if __name__ == "__main__":
    main()
