"""Typer CLI entrypoint for inspecting and checking compatibility versions."""

from __future__ import annotations

from typing import Optional

import typer

from peer_compat import get_version
from peer_compat.core.config import get_settings
from peer_compat.core.errors import InvalidVersionRangeError
from peer_compat.core.logging import setup_logging
from peer_compat.protocol.compatibility import CompatibilityVersion, current, current_compatible
from peer_compat.protocol.features import Feature, catalog
from peer_compat.protocol.ranges import VersionRange


app = typer.Typer(help="Peer compatibility negotiation toolkit.")


def _configure() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)


def _feature(name: str) -> Feature:
    try:
        return Feature.from_name(name)
    except KeyError:
        known = ", ".join(feature.value for feature in catalog())
        raise typer.BadParameter(f"Unknown feature {name!r}; expected one of: {known}") from None


def _range(spec: Optional[str]) -> Optional[VersionRange]:
    if spec is None:
        return None
    try:
        return VersionRange.from_spec(spec)
    except InvalidVersionRangeError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("current")
def show_current() -> None:
    """Print this endpoint's compatibility version string."""

    _configure()
    typer.echo(str(current()))


@app.command("parse")
def parse_version(text: str = typer.Argument(..., help="Compatibility version string to parse")) -> None:
    """Show the per-feature versions a peer string parses into."""

    _configure()
    parsed = CompatibilityVersion.from_string(text)
    for feature in catalog():
        version = parsed.get(feature)
        typer.echo(f"{feature.value}={version if version is not None else 'absent'}")


@app.command("check")
def check_peer(
    peer: str = typer.Argument(..., help="Peer compatibility version string"),
    feature: str = typer.Option(Feature.ROOT.value, "--feature", help="Feature to check"),
    acceptable_range: Optional[str] = typer.Option(None, "--range", help="Acceptable range, e.g. [1.0,2.0)"),
) -> None:
    """Check whether a peer is compatible with this endpoint; exits 1 when it is not."""

    _configure()
    compatible = current_compatible(peer, _feature(feature), _range(acceptable_range))
    typer.echo("compatible" if compatible else "incompatible")
    if not compatible:
        raise typer.Exit(code=1)


@app.command("version")
def show_version() -> None:
    """Print the installed package version."""

    _configure()
    typer.echo(get_version())


if __name__ == "__main__":
    app()
