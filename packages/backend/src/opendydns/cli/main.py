"""opendydns: manage your dynamic DNS aliases from the terminal.

Usage:
    opendydns login bob@example.com         # Prompt for password, store token
    opendydns ls                            # List aliases
    opendydns add home.example.com 1.2.3.4  # Register an alias
    opendydns set-ip home.example.com 5.6.7.8
    opendydns rm home.example.com
    opendydns domains                       # Domains you can register under
    opendydns logout
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import click

from opendydns import __version__
from opendydns.client import DEFAULT_API_URL, APIClient, ApiError

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_PATH = Path("~/.config/opendydns/cli.json")


@dataclass
class CliConfig:
    api_addr: str = DEFAULT_API_URL
    token: str = ""

    @classmethod
    def load(cls, path: Path) -> "CliConfig":
        """Read the config file, creating a default one if it's missing."""
        if not path.exists():
            conf = cls()
            conf.save(path)
            return conf
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"{path} is not valid JSON ({e})") from e
        if not isinstance(data, dict):
            raise ValueError(f"{path} must hold a JSON object")
        return cls(
            api_addr=data.get("api_addr", DEFAULT_API_URL),
            token=data.get("token", ""),
        )

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2))
        # The token is a credential
        path.chmod(0o600)


@dataclass
class CliContext:
    conf: CliConfig
    path: Path

    @property
    def api_url(self) -> str:
        return os.environ.get("OPENDYDNS_API_URL", self.conf.api_addr).rstrip("/")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client(ctx: CliContext, token: Optional[str] = None) -> APIClient:
    """Build an API client pointed at the configured daemon."""
    return APIClient(ctx.api_url, token=token)


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _call(ctx: CliContext, method: str, *args, authenticated: bool = True):
    """Invoke an APIClient method, exiting with the daemon's message on error."""
    token = None
    if authenticated:
        token = ctx.conf.token
        if not token:
            click.secho("Error: not logged in (run `opendydns login`)", fg="red", err=True)
            sys.exit(1)

    async def _do():
        async with _client(ctx, token) as c:
            return await getattr(c, method)(*args)

    try:
        return _run(_do())
    except ApiError as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)


def _split_alias(name: str) -> tuple[str, str]:
    host, _, domain = name.partition(".")
    if not host or not domain:
        click.secho(f"Error: invalid alias {name!r} (expected host.domain)", fg="red", err=True)
        sys.exit(1)
    return host, domain


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "-"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="opendydns")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=lambda: os.environ.get("OPENDYDNS_CLI_CONFIG", str(DEFAULT_CONFIG_PATH)),
    help="Path of the CLI config file",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path):
    """OpenDyDNS client: manage your dynamic DNS aliases."""
    path = Path(config_path).expanduser()
    try:
        conf = CliConfig.load(path)
    except ValueError as e:
        click.secho(f"Error: corrupt config file: {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj = CliContext(conf=conf, path=path)


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
@click.pass_obj
def login(ctx: CliContext, email: str, password: str):
    """Authenticate against an OpenDyDNS daemon."""
    if ctx.conf.token:
        click.secho("Error: already logged in (run `opendydns logout` first)", fg="red", err=True)
        sys.exit(1)

    token = _call(ctx, "authenticate", email, password, authenticated=False)
    ctx.conf.token = token
    ctx.conf.save(ctx.path)
    click.secho(f"Logged in as {email}", fg="green")


@main.command()
@click.pass_obj
def logout(ctx: CliContext):
    """Forget the stored token."""
    ctx.conf.token = ""
    ctx.conf.save(ctx.path)
    click.echo("Logged out")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
@click.pass_obj
def ls(ctx: CliContext, as_json: bool):
    """List current aliases."""
    aliases = _call(ctx, "get_aliases")
    if as_json:
        click.echo(json.dumps(aliases, indent=2))
        return
    if not aliases:
        click.echo("No aliases.")
        return
    rows = [{**a, "name": f"{a['host']}.{a['domain']}"} for a in aliases]
    _print_table(rows, [("ALIAS", "name", 40), ("VALUE", "value", 39)])


@main.command()
@click.argument("alias")
@click.argument("ip")
@click.pass_obj
def add(ctx: CliContext, alias: str, ip: str):
    """Register ALIAS (host.domain) pointing at IP."""
    host, domain = _split_alias(alias)
    created = _call(ctx, "register_alias", host, domain, ip)
    click.secho(f"Registered {created['host']}.{created['domain']} -> {created['value']}", fg="green")


@main.command()
@click.argument("alias")
@click.pass_obj
def rm(ctx: CliContext, alias: str):
    """Delete ALIAS."""
    _split_alias(alias)
    _call(ctx, "delete_alias", alias)
    click.secho(f"Deleted {alias}", fg="green")


@main.command("set-ip")
@click.argument("alias")
@click.argument("ip")
@click.option("--domain", "new_domain", default=None, help="Move ALIAS under this domain")
@click.pass_obj
def set_ip(ctx: CliContext, alias: str, ip: str, new_domain: Optional[str]):
    """Override the IP value of ALIAS."""
    host, domain = _split_alias(alias)
    updated = _call(ctx, "update_alias", host, domain, ip, new_domain)
    click.secho(f"Updated {updated['host']}.{updated['domain']} -> {updated['value']}", fg="green")


@main.command()
@click.pass_obj
def domains(ctx: CliContext):
    """List the domains aliases can be registered under."""
    for domain in _call(ctx, "get_domains"):
        click.echo(domain)


if __name__ == "__main__":
    main()
