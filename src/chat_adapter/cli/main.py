"""Main CLI entry point for Chat Adapter.

Provides commands for working with the messages adapter from a terminal:
    chat-adapter request <conversation> [--cache-over N] [--param key=value] [--approximate]
    chat-adapter replay <stream-file> [--inline]
    chat-adapter chat <conversation> [--param key=value]
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError

from ..llm import (
    ApproximateTokenizer,
    LLMConfig,
    LLMError,
    LLMMessage,
    StreamSession,
    build_request,
    chat_output,
    create_llm_client,
    inline_output,
)


def parse_params(params: tuple[str, ...]) -> dict[str, Any]:
    """Parse key=value options, converting numbers, booleans and lists."""
    parsed: dict[str, Any] = {}
    for p in params:
        if "=" not in p:
            continue
        k, v = p.split("=", 1)
        # Try to parse as int/float/bool
        try:
            parsed[k] = int(v)
        except ValueError:
            try:
                parsed[k] = float(v)
            except ValueError:
                if v.lower() in ("true", "false"):
                    parsed[k] = v.lower() == "true"
                elif k == "stop_sequences":
                    parsed[k] = [s for s in v.split(",") if s]
                else:
                    parsed[k] = v
    return parsed


def load_conversation(path: Path) -> tuple[list[LLMMessage], dict[str, Any]]:
    """Load a conversation file.

    The file is YAML (or JSON) holding either a list of messages or a
    mapping with ``messages`` and optional ``parameters`` keys.
    """
    data = yaml.safe_load(path.read_text()) or {}
    if isinstance(data, list):
        data = {"messages": data}
    messages = [LLMMessage(**m) for m in data.get("messages", [])]
    return messages, dict(data.get("parameters") or {})


@click.group()
@click.version_option(version="0.1.0", prog_name="chat-adapter")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Chat Adapter - streamed Anthropic messages for chat clients.

    \b
    Commands:
        chat-adapter request <conversation>
        chat-adapter replay <stream-file>
        chat-adapter chat <conversation>
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Request Command
# =============================================================================


@cli.command()
@click.argument("conversation", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--cache-over", type=int, help="Token threshold for caching user messages")
@click.option("--param", "-p", multiple=True, help="Generation parameter in key=value format")
@click.option(
    "--approximate", is_flag=True, help="Estimate tokens from length instead of using tiktoken"
)
def request(
    conversation: Path, cache_over: int | None, param: tuple[str, ...], approximate: bool
) -> None:
    """Print the request body a conversation produces.

    \b
    Examples:
        chat-adapter request conversation.yaml
        chat-adapter request conversation.yaml --cache-over 100 -p max_tokens=512
        chat-adapter request conversation.yaml --approximate
    """
    try:
        messages, parameters = load_conversation(conversation)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        click.echo(f"Error: Could not read conversation: {e}")
        sys.exit(1)
    parameters.update(parse_params(param))

    # The key is never part of the request body, so any value renders the payload
    config_kwargs: dict[str, Any] = {"api_key": os.environ.get("ANTHROPIC_API_KEY", "unused")}
    if cache_over is not None:
        config_kwargs["cache_over"] = cache_over

    try:
        config = LLMConfig(**config_kwargs)
        tokenizer = ApproximateTokenizer() if approximate else None
        payload = build_request(messages, config, parameters, tokenizer=tokenizer)
    except (LLMError, ValidationError) as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    click.echo(json.dumps(payload.to_dict(), indent=2))


# =============================================================================
# Replay Command
# =============================================================================


@cli.command()
@click.argument("stream_file", type=click.File("rb"))
@click.option("--inline", is_flag=True, help="Print plain text only")
def replay(stream_file: Any, inline: bool) -> None:
    """Decode a captured event stream.

    \b
    Examples:
        chat-adapter replay response.sse
        chat-adapter replay response.sse --inline
    """
    session = StreamSession()
    try:
        for chunk in iter(lambda: stream_file.read(4096), b""):
            _echo_frames(session.feed(chunk), inline)
        _echo_frames(session.finish(), inline)
    except LLMError as e:
        click.echo()
        click.echo(f"Error: {e}")
        sys.exit(1)

    click.echo()
    click.echo(f"Tokens: {session.total_tokens}")


def _echo_frames(events: list[Any], inline: bool) -> None:
    for event in events:
        if inline:
            text = inline_output(event)
            if text:
                click.echo(text, nl=False)
            continue
        output = chat_output(event)
        if output is None:
            continue
        if output.role:
            click.echo(f"## {output.role}")
        if output.content:
            click.echo(output.content, nl=False)


# =============================================================================
# Chat Command
# =============================================================================


@cli.command()
@click.argument("conversation", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--param", "-p", multiple=True, help="Generation parameter in key=value format")
@click.option("--inline", is_flag=True, help="Print plain text only")
def chat(conversation: Path, param: tuple[str, ...], inline: bool) -> None:
    """Send a conversation and stream the reply.

    Reads ANTHROPIC_API_KEY (and optionally ANTHROPIC_MODEL and
    ANTHROPIC_CACHE_OVER) from the environment.

    \b
    Examples:
        chat-adapter chat conversation.yaml
        chat-adapter chat conversation.yaml -p temperature=0.5
    """
    try:
        messages, parameters = load_conversation(conversation)
        config = LLMConfig.from_env()
    except (yaml.YAMLError, ValidationError, TypeError, ValueError) as e:
        click.echo(f"Error: {e}")
        sys.exit(1)
    parameters.update(parse_params(param))

    client = create_llm_client(config)
    session = StreamSession()
    try:
        if inline:
            for text in client.stream_inline(messages, parameters, session=session):
                click.echo(text, nl=False)
        else:
            for output in client.stream_chat(messages, parameters, session=session):
                if output.role:
                    click.echo(f"## {output.role}")
                if output.content:
                    click.echo(output.content, nl=False)
    except LLMError as e:
        click.echo()
        click.echo(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo()
        click.echo("Cancelled.")

    click.echo()
    click.echo(f"Tokens: {session.total_tokens}")


if __name__ == "__main__":
    cli()
