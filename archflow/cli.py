"""Command-line interface."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx

from .config import ProviderKind, ProviderSettings, print_config
from .errors import ArchflowError
from .importer import DiagramImportPipeline
from .models import DesignArtifact, Graph
from .providers import create_adapter
from .session import ConversationSession
from .synthesizer import DesignSynthesizer


def _write_output(path: str, content: str):
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content)
    print(f"Saved: {output}")


def show_artifact(artifact: DesignArtifact, output: Optional[str] = None):
    """Print a design artifact and optionally save it as JSON."""
    graph = artifact.graph
    print(f"\n{artifact.summary}")
    print(f"\n{artifact.diagram_text}")
    print(f"\nGraph: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
    for node in graph.nodes:
        tech = f" ({node.data.tech})" if node.data.tech else ""
        print(f"  - {node.label} [{node.kind.value}]{tech}")
    if output:
        _write_output(output, artifact.model_dump_json(by_alias=True, indent=2))


def show_graph(graph: Graph, output: Optional[str] = None):
    """Print a graph as JSON and optionally save it."""
    content = graph.model_dump_json(by_alias=True, indent=2)
    print(content)
    if output:
        _write_output(output, content)


async def run_chat_interactive(settings: ProviderSettings, output: Optional[str] = None):
    """Run the chat builder interactive session."""
    print("=" * 60)
    print("archflow - AI Chat Builder")
    print("=" * 60)
    print_config(settings.kind)
    print("\nCommands: generate, history, reset, quit")

    async with httpx.AsyncClient(timeout=settings.timeout) as client:
        adapter = create_adapter(settings, client=client)
        synthesizer = DesignSynthesizer(adapter)
        session = ConversationSession(adapter)
        print(f"\nAI: {session.greeting().content}")

        while True:
            try:
                user_input = input("\nYou: ").strip()
            except (EOFError, KeyboardInterrupt):
                break

            if not user_input:
                continue
            command = user_input.lower()
            if command == "quit":
                break
            if command == "history":
                for message in session.messages:
                    print(f"{message.role.value.upper()}: {message.content}")
                continue
            if command == "reset":
                session = ConversationSession(adapter)
                print(f"\nAI: {session.greeting().content}")
                continue
            if command == "generate":
                if not session.messages:
                    print("Tell me about your project first.")
                    continue
                print("Generating design...")
                try:
                    artifact = await synthesizer.generate(session.messages)
                except ArchflowError as e:
                    print(f"Generation failed: {e}")
                    print("Type 'generate' to try again.")
                    continue
                show_artifact(artifact, output)
                continue

            was_ready = session.ready_to_generate
            result = await session.send(user_input)
            print(f"\nAI: {result.message.content}")
            if result.ready_to_generate and not was_ready:
                print("\n[ready to generate] Type 'generate' to build the design.")


async def run_image_import(
    settings: ProviderSettings,
    image_path: str,
    output: Optional[str] = None,
    assume_yes: bool = False,
) -> bool:
    """Import a diagram image. Returns True if a graph was produced."""
    async with httpx.AsyncClient(timeout=settings.timeout) as client:
        pipeline = DiagramImportPipeline(create_adapter(settings, client=client))

        print(f"Analyzing {image_path}...")
        try:
            diagram_text = await pipeline.import_from_path(image_path)
        except ArchflowError as e:
            print(f"Analysis failed: {e}", file=sys.stderr)
            return False
        print(f"\n{diagram_text}\n")

        if not assume_yes:
            try:
                answer = input("Convert to an interactive graph? [y/N] ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                answer = ""
            if answer not in ("y", "yes"):
                return False

        print("Converting...")
        try:
            graph = await pipeline.materialize_graph(diagram_text)
        except ArchflowError as e:
            print(f"Conversion failed: {e}", file=sys.stderr)
            return False
        show_graph(graph, output)
        return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="archflow",
        description="Design system architectures by chatting with an AI or importing a diagram image",
    )
    parser.add_argument(
        "--provider", "-p",
        choices=[kind.value for kind in ProviderKind],
        help="Model provider (default: detected from environment)"
    )
    parser.add_argument(
        "--image", "-i",
        type=str,
        metavar="PATH",
        help="Import a diagram image instead of chatting"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the generated design or graph JSON to this file"
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Convert imported diagrams without asking"
    )
    parser.add_argument(
        "--config", "-c",
        action="store_true",
        help="Show config and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    kind = ProviderKind(args.provider) if args.provider else None
    try:
        settings = ProviderSettings.from_env(kind)
        if args.config:
            print_config(settings.kind)
            return
        if args.image:
            success = asyncio.run(run_image_import(settings, args.image, args.output, args.yes))
            sys.exit(0 if success else 1)
        asyncio.run(run_chat_interactive(settings, args.output))
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
