"""CLI commands for vidshare."""

import asyncio
import base64
import os
import re
import secrets
import sys
from pathlib import Path

import click


@click.group()
@click.version_option(package_name="vidshare")
def cli():
    """vidshare - video sharing API backend."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to (defaults to PORT from settings)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
)
def serve(host, port, reload, workers, log_level):
    """Run the API server."""
    import signal

    from hypercorn.asyncio import serve as hypercorn_serve
    from hypercorn.config import Config

    from vidshare.config import get_settings

    if port is None:
        port = get_settings().port

    config = Config()
    config.application_path = "vidshare.asgi:create_app()"
    config.bind = [f"{host}:{port}"]
    config.workers = 1 if reload else workers
    config.loglevel = log_level.upper()
    config.include_server_header = False

    if reload:
        config.use_reloader = True
        from hypercorn.run import run
        run(config)
        return

    from vidshare.asgi import create_app

    app = create_app()

    shutdown_event = asyncio.Event()

    loop = asyncio.new_event_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_event.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_event.set)
    try:
        loop.run_until_complete(
            hypercorn_serve(app, config, shutdown_trigger=shutdown_event.wait)
        )
    finally:
        loop.close()


@cli.command()
@click.option(
    "--write",
    type=click.Path(),
    default=None,
    help="Write SECRET_KEY to a .env file",
)
@click.option(
    "--format",
    "fmt",
    default="urlsafe",
    type=click.Choice(["urlsafe", "hex", "base64"]),
    help="Output format for the secret key",
)
@click.option("--length", default=32, type=int, help="Number of random bytes")
def secret(write, fmt, length):
    """Generate a secret key for signing access tokens."""
    if fmt == "urlsafe":
        key = secrets.token_urlsafe(length)
    elif fmt == "hex":
        key = secrets.token_hex(length)
    else:  # base64
        key = base64.b64encode(secrets.token_bytes(length)).decode("ascii")

    if write:
        env_path = Path(write)
        env_content = env_path.read_text() if env_path.exists() else ""

        secret_key_pattern = re.compile(r"^SECRET_KEY=.*$", re.MULTILINE)
        new_line = f"SECRET_KEY={key}"

        if secret_key_pattern.search(env_content):
            env_content = secret_key_pattern.sub(new_line, env_content)
        else:
            if env_content and not env_content.endswith("\n"):
                env_content += "\n"
            env_content += new_line + "\n"

        env_path.write_text(env_content)
        click.echo(f"SECRET_KEY written to {env_path}")
    else:
        click.echo(key)


def _run_alembic(project_root: Path, args: list[str]) -> None:
    """Build an Alembic Config programmatically and run the given command."""
    from alembic.config import CommandLine, Config

    package_dir = Path(__file__).parent

    alembic_ini = project_root / "alembic.ini"
    if not alembic_ini.exists():
        click.echo("Error: Could not find alembic.ini", err=True)
        sys.exit(1)

    cfg = Config(str(alembic_ini))
    cfg.set_main_option("script_location", str(package_dir / "alembic"))

    cmd = CommandLine()
    options = cmd.parser.parse_args(args)
    if not hasattr(options, "cmd"):
        cmd.parser.error("too few arguments")
    else:
        cfg.cmd_opts = options
        fn, positional, kwarg = options.cmd
        fn(
            cfg,
            *[getattr(options, k, None) for k in positional],
            **{k: getattr(options, k, None) for k in kwarg},
        )


@cli.command(
    context_settings=dict(
        ignore_unknown_options=True,
        allow_extra_args=True,
    )
)
@click.pass_context
def db(ctx):
    """Run database migrations via Alembic.

    \b
    Examples:
        vidshare db upgrade head   # Apply all migrations
        vidshare db downgrade -1   # Rollback one migration
        vidshare db current        # Show current revision
        vidshare db revision -m "description" --autogenerate
    """
    project_root = Path.cwd()
    if not (project_root / "alembic.ini").exists():
        project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    if not ctx.args:
        click.echo(ctx.get_help())
        return

    _run_alembic(project_root, ctx.args)


async def _with_session(fn):
    """Run ``fn(session)`` against the configured database."""
    from vidshare.app_config import build_db_config
    from vidshare.config import get_settings

    db_config = build_db_config(get_settings())
    try:
        async with db_config.get_session() as session:
            return await fn(session)
    finally:
        await db_config.get_engine().dispose()


@cli.command("create-user")
@click.argument("username")
@click.option("--email", required=True, help="Email address")
@click.option("--full-name", default="", help="Display name")
@click.password_option(help="Password (prompted when omitted)")
def create_user(username, email, full_name, password):
    """Create a user account."""
    from vidshare.auth.passwords import hash_password
    from vidshare.db.services import user_service

    async def _create(session):
        if await user_service.username_or_email_taken(session, username, email):
            return None
        return await user_service.create_user(
            session,
            username=username,
            email=email,
            full_name=full_name,
            password_hash=hash_password(password),
        )

    user = asyncio.run(_with_session(_create))
    if user is None:
        click.echo("Error: username or email already in use", err=True)
        sys.exit(1)
    click.echo(f"Created user {user.username} ({user.id})")


@cli.command("issue-token")
@click.argument("username")
@click.option("--ttl", default=None, type=int, help="Token lifetime in seconds (defaults to auth.token_ttl)")
@click.password_option(confirmation_prompt=False, help="Password (prompted when omitted)")
def issue_token(username, ttl, password):
    """Mint an access token for USERNAME after checking the password."""
    from vidshare.auth.passwords import verify_password
    from vidshare.auth.tokens import create_access_token
    from vidshare.config import get_settings
    from vidshare.db.services import user_service

    settings = get_settings()

    async def _lookup(session):
        return await user_service.get_user_by_username(session, username)

    user = asyncio.run(_with_session(_lookup))
    if user is None or not verify_password(password, user.password_hash):
        click.echo("Error: invalid username or password", err=True)
        sys.exit(1)

    click.echo(create_access_token(user.id, settings.secret_key, ttl or settings.auth.token_ttl))


if __name__ == "__main__":
    cli()
