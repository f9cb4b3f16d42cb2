"""
Command-line interface for music-replacer.

This module implements the CLI using Click; rich-click is used for the
help output colors. The CLI plays the part of the host client's UI: every
command waits for the background work it submitted before exiting.

Commands:
    music-replacer tracks [--overridden]             List track names
    music-replacer show <name>                       Show an override
    music-replacer search <query> [--limit N]        Search YouTube
    music-replacer set <name> --file <file.wav>      Override with a local file
    music-replacer set <name> --youtube <url>        Override with a YouTube video
    music-replacer bulk <directory>                  Override from <track>.wav files
    music-replacer remove <name> | --all             Remove overrides

Configuration:
    Reads config.yaml from the current directory, or the file given
    with --config. See music_replacer.core.config.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100

from music_replacer import __version__
from music_replacer.core import (
    Config,
    MusicReplacerError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from music_replacer.download import WavConverter
from music_replacer.host import create_host
from music_replacer.tracks import Tracks
from music_replacer.utils import format_duration
from music_replacer.youtube import lookup_stream_item, search as youtube_search

logger = get_logger(__name__)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug messages on the console"
)
@click.version_option(__version__, prog_name="music-replacer")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """
    music-replacer: Replace game music tracks with your own audio.

    \b
    EXAMPLES:
        music-replacer set "Harmony" --file harmony.wav
        music-replacer set "Harmony" --youtube "https://www.youtube.com/watch?v=..."
        music-replacer bulk ~/remixes          # files named <track>.wav
        music-replacer remove --all
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


def _load_configuration(ctx: click.Context) -> Config:
    """
    Load config.yaml and set up logging.

    Raises:
        click.ClickException: On configuration errors (exit code 1).
    """
    try:
        config = load_config(ctx.obj["config_path"])
    except MusicReplacerError as e:
        raise click.ClickException(f"Configuration error: {e.message}") from e

    try:
        setup_logging(config.storage.log_directory, verbose=ctx.obj["verbose"])
    except OSError as e:
        raise click.ClickException(
            f"Can't write logs to {config.storage.log_directory}: {e}"
        ) from e
    ctx.obj["config"] = config
    return config


@contextmanager
def _open_tracks(ctx: click.Context) -> Iterator[Tracks]:
    """
    Build Tracks on top of a freshly created host.

    On exit the task pool is drained, then the store, the HTTP session
    and the log files are closed.
    """
    config = _load_configuration(ctx)
    converter = WavConverter(
        config.conversion.endpoint,
        read_timeout=config.conversion.read_timeout,
        connect_timeout=config.conversion.connect_timeout,
    )
    host = None

    try:
        host = create_host(config)
        yield Tracks(
            host,
            config.storage.overrides_directory,
            converter,
            cookie_file=config.youtube.cookie_file,
        )
    except MusicReplacerError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        raise click.ClickException(e.message) from e
    finally:
        if host is not None:
            host.close()
        converter.close()
        shutdown_logging()


def _require_track(tracks: Tracks, name: str) -> None:
    if tracks.exists(name):
        return

    suggestions = tracks.suggest(name)
    message = f"Unknown track: {name!r}"
    if suggestions:
        message += ". Did you mean: " + ", ".join(repr(s) for s in suggestions) + "?"
    raise click.ClickException(message)


@cli.command()
@click.option("--overridden", is_flag=True, help="Only list overridden tracks")
@click.pass_context
def tracks(ctx: click.Context, overridden: bool) -> None:
    """List known track names."""
    with _open_tracks(ctx) as catalog:
        names = catalog.overridden_tracks() if overridden else catalog.track_names
        for name in names:
            click.echo(name)


@cli.command()
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, name: str) -> None:
    """Show the override of a track."""
    with _open_tracks(ctx) as catalog:
        override = catalog.get_override(name)
        if override is None:
            raise click.ClickException(f"No override for {name!r}")

        click.echo(override.name)
        click.echo(f"  Source: {'local file' if override.from_local else 'YouTube'}")
        click.echo(f"  File: {catalog.path_for(name)}")
        for key, value in override.additional_info.items():
            click.echo(f"  {key}: {value}")


@cli.command()
@click.argument("query")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Number of results")
@click.pass_context
def search(ctx: click.Context, query: str, limit: Optional[int]) -> None:
    """Search YouTube for videos to use as overrides."""
    config = _load_configuration(ctx)
    try:
        results = youtube_search(
            query,
            limit=limit or config.youtube.search_limit,
            cookie_file=config.youtube.cookie_file,
        )
    except MusicReplacerError as e:
        raise click.ClickException(e.message) from e
    finally:
        shutdown_logging()

    if not results:
        click.echo("No results")
        return

    for number, item in enumerate(results, start=1):
        click.echo(f"{number}. {item.name} ({format_duration(item.duration)}) - {item.uploader_name}")
        click.echo(f"   {item.url}")


@cli.command(name="set")
@click.argument("name")
@click.option(
    "--file", "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<file.wav>",
    help="Local WAV file"
)
@click.option(
    "--youtube", "youtube_url",
    type=str,
    default=None,
    metavar="<url>",
    help="YouTube video URL"
)
@click.pass_context
def set_override(
    ctx: click.Context,
    name: str,
    file_path: Optional[Path],
    youtube_url: Optional[str]
) -> None:
    """Override a track with a local WAV file or a YouTube video."""
    if (file_path is None) == (youtube_url is None):
        raise click.UsageError("Use exactly one of --file or --youtube")

    with _open_tracks(ctx) as catalog:
        _require_track(catalog, name)

        if file_path is not None:
            source = file_path.resolve()
            future = catalog.submit_override_from_file(name, source)
            if future is None:
                raise click.ClickException(f"{file_path} can't be used, only .wav files are supported")
            override_created = future.result()
        else:
            item = lookup_stream_item(youtube_url, cookie_file=ctx.obj["config"].youtube.cookie_file)
            override_created = catalog.create_override_from_stream(name, item).result()

        if not override_created:
            raise click.ClickException(f"Failed to override {name!r}, see the log for details")

        click.echo(f"Overrode {name!r}")


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def bulk(ctx: click.Context, directory: Path) -> None:
    """Override every track that has a <track name>.wav file in DIRECTORY."""
    with _open_tracks(ctx) as catalog:
        created = catalog.bulk_create_override(directory).result()
        click.echo(f"Overrode {created} tracks")


@cli.command()
@click.argument("name", required=False)
@click.option("--all", "remove_all", is_flag=True, help="Remove all overrides")
@click.pass_context
def remove(ctx: click.Context, name: Optional[str], remove_all: bool) -> None:
    """Remove the override of a track, or all overrides."""
    if (name is None) == (not remove_all):
        raise click.UsageError("Give a track name or --all")

    with _open_tracks(ctx) as catalog:
        if remove_all:
            futures = catalog.remove_all_overrides()
        else:
            future = catalog.remove_override(name)
            if future is None:
                raise click.ClickException(f"No override for {name!r}")
            futures = [future]

        for future in futures:
            future.result()

        click.echo(f"Removed {len(futures)} override(s)")


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
