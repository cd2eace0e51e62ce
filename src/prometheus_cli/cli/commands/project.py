"""``init``, ``build`` and ``release`` — the local project workflow."""

from __future__ import annotations

import argparse
from typing import Any

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.console import console, escape
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.core.documents import (
    CATEGORIES,
    MANIFEST_FILE,
    MANIFEST_HEADER,
    NAMESPACE_PATTERN,
    REPRODUCIBLE_WASM_PATH,
    new_manifest,
    require_submission,
    split_list,
)
from prometheus_cli.core.wasm import parse_version
from prometheus_cli.exceptions import BuildError, ManifestError
from prometheus_cli.infra.project import ProjectLayout

_CATEGORY_TITLES = {"AI": "AI / Machine Learning"}


def register(subparsers: Any) -> None:
    init = subparsers.add_parser("init", help="Create a new prometheus.yml interactively.")
    init.set_defaults(handler=_handle_init)

    build = subparsers.add_parser(
        "build",
        help="Build your canister in a reproducible docker environment.",
    )
    build.add_argument("canister", nargs="?", default=None, help="dfx canister name (monorepos).")
    build.add_argument(
        "--bootstrap",
        action="store_true",
        help="Create docker-compose.yml, Dockerfile, Dockerfile.base and build.sh.",
    )
    build.add_argument("--clean", action="store_true", help="Remove docker images after the build.")
    build.set_defaults(handler=_handle_build)

    release = subparsers.add_parser(
        "release",
        help="Bump the version, commit, build and publish in one go.",
    )
    release.add_argument("version", help="Semantic version, e.g. 1.2.0")
    release.add_argument("canister", nargs="?", default=None, help="dfx canister name (monorepos).")
    release.add_argument("--skip-git", action="store_true", help="Skip all git operations.")
    release.add_argument("--skip-build", action="store_true", help="Publish the existing WASM.")
    release.set_defaults(handler=_handle_release)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def _validate_namespace_answer(value: str) -> bool | str:
    if NAMESPACE_PATTERN.match(value.strip()):
        return True
    return "Namespace must be in reverse-domain format (e.g., com.my-company.app)"


def _handle_init(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.prompts import ask_select, ask_text
    from prometheus_cli.infra.yaml_store import save_yaml

    if ctx.manifest_path.exists():
        console.print(f"[yellow]{MANIFEST_FILE} already exists in this directory. Skipping.[/yellow]")
        return exit_codes.SUCCESS

    console.print("[bold]Welcome to the Prometheus Protocol Publisher![/bold]")
    console.print("   Let's create a complete submission package for your application.\n")

    namespace = ask_text(
        "Enter a unique, reverse-domain namespace for your app (e.g., com.mycompany.app):",
        validate=_validate_namespace_answer,
    )
    publisher = ask_text("What is your publisher or developer name?")
    category = ask_select(
        "Pick a category for your application:",
        [(_CATEGORY_TITLES.get(c, c), c) for c in CATEGORIES],
    )
    name = ask_text("What is the human-readable name of this version of your application?")
    description = ask_text("Enter a short, one-sentence description for this version:")
    why_this_app = ask_text("Describe why a user should choose your app (longer description):")
    key_features = ask_text("List the key features of your app (comma-separated):")
    tags = ask_text("Enter some relevant tags for discoverability (comma-separated):")
    repo_url = ask_text("Enter the public URL of your source code repository (e.g., GitHub):")
    icon_url = ask_text("Enter the public URL for your app icon (e.g., a 512x512 PNG):")
    banner_url = ask_text("Enter the public URL for your app banner/promo image:")

    if not namespace or not name:
        console.print("\nInitialization cancelled. Exiting.")
        return exit_codes.SUCCESS

    manifest = new_manifest(
        namespace=namespace,
        name=name,
        publisher=publisher,
        category=category,
        description=description,
        why_this_app=why_this_app,
        key_features=split_list(key_features),
        tags=split_list(tags),
        repo_url=repo_url,
        icon_url=icon_url,
        banner_url=banner_url,
    )
    save_yaml(ctx.manifest_path, manifest, header=MANIFEST_HEADER)

    console.print(f"\n[bold green]Success![/bold green] {MANIFEST_FILE} has been created.")
    console.print("   Build with 'app-store-cli build --bootstrap', then publish with")
    console.print("   'app-store-cli release <version>'.")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# build
# ---------------------------------------------------------------------------

def _prepare_build_files(layout: ProjectLayout, moc_version: str, *, bootstrap: bool) -> None:
    from prometheus_cli.infra import reproducible_build as rb

    missing = rb.missing_build_files(layout.root)
    if missing:
        if not bootstrap:
            raise BuildError(
                "Reproducible build files missing: " + ", ".join(missing),
                hint="Run with --bootstrap to create them: app-store-cli build --bootstrap",
            )
        console.print("Bootstrapping reproducible build setup...")
        lacking = rb.validate_motoko_project(layout.canister_dir)
        if lacking:
            raise BuildError(f"Not a valid Motoko project. Missing: {', '.join(lacking)}")
        rb.bootstrap_build_files(layout.root, moc_version=moc_version)
        console.print("[green]Setup complete![/green]\n")

    previous = rb.sync_compose_moc_version(layout.root, moc_version)
    if previous is not None:
        console.print(f"Updated docker-compose.yml MOC_VERSION: {previous} -> {moc_version}")


def run_build(
    ctx: CommandContext,
    layout: ProjectLayout,
    *,
    bootstrap: bool = False,
    clean: bool = False,
    prepare_images: bool = False,
) -> None:
    """Run the reproducible build for *layout*.

    With *prepare_images* the shared docker network and the toolchain
    base image are created first when missing.
    """
    from prometheus_cli.infra import project
    from prometheus_cli.infra import reproducible_build as rb
    from prometheus_cli.infra.tools import require_tool

    moc_version = project.read_moc_version(layout.root)
    console.print(f"Detected Motoko compiler version: {moc_version}\n")
    _prepare_build_files(layout, moc_version, bootstrap=bootstrap)
    rb.require_docker()
    require_tool("docker-compose")

    if prepare_images:
        if rb.ensure_docker_network():
            console.print(f"Created docker network: {rb.DOCKER_NETWORK}")
        if rb.ensure_base_image(layout.root, moc_version):
            console.print(f"Built base image: motoko-build-base:moc-{moc_version}")

    (layout.root / "out").mkdir(exist_ok=True)
    console.print("[bold]Starting docker build...[/bold]")
    console.print("   This may take several minutes on the first run.\n")
    rb.docker_build(layout.root, github_token=ctx.settings.github_token)

    if clean:
        console.print("\nCleaning up docker images...")
        try:
            rb.remove_images(layout.root)
        except BuildError as exc:
            console.print(f"[yellow]Warning:[/yellow] Could not remove docker images: {escape(exc)}")


def _handle_build(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.infra.project import resolve_layout

    console.print("[bold]Prometheus Protocol - Reproducible Build[/bold]\n")
    layout = resolve_layout(ctx.cwd, args.canister)
    console.print(f"Project root: {layout.root}")
    if layout.canister:
        console.print(f"Canister: {layout.canister}")
        console.print(f"Canister path: {layout.canister_dir}")

    run_build(ctx, layout, bootstrap=args.bootstrap, clean=args.clean)

    console.print("\n[bold green]Build completed successfully![/bold green]")
    console.print("   Next: test your WASM locally, then run 'app-store-cli publish <version>'.")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# release
# ---------------------------------------------------------------------------

def _handle_release(args: argparse.Namespace, ctx: CommandContext) -> int:
    from prometheus_cli.cli.commands.publishing import publish_version
    from prometheus_cli.infra import git
    from prometheus_cli.infra.project import bump_main_mo_version, resolve_layout
    from prometheus_cli.infra.yaml_store import load_yaml, save_yaml

    version: str = args.version
    parse_version(version)
    layout = resolve_layout(ctx.cwd, args.canister)
    if not layout.manifest_path.is_file():
        raise ManifestError(
            f"{MANIFEST_FILE} not found in {layout.canister_dir}.",
            hint="Run 'app-store-cli init' first.",
        )
    root = layout.root

    console.print(f"[bold]Releasing version {version}[/bold]\n")
    if layout.canister:
        console.print(f"Canister: {layout.canister} ({layout.canister_dir})")

    if not args.skip_git:
        git.ensure_repository(root)
        git.ensure_clean(root)

    console.print("Step 1: Updating version in src/main.mo...")
    bumped = bump_main_mo_version(layout.canister_dir, version)
    if bumped is None:
        console.print("   src/main.mo not found, skipping version bump.")
    else:
        main_mo, previous = bumped
        console.print(f"   {previous} -> {version}")
        if not args.skip_git:
            git.add(root, main_mo)

    if args.skip_git:
        console.print("\nStep 2: Skipping git operations.")
    else:
        console.print("\nStep 2: Committing version change...")
        if not git.commit(root, f"v{version}"):
            console.print("   (No changes to commit)")
        git.push(root)
    commit_hash = git.head_commit(root)
    console.print(f"   Commit hash: {commit_hash}")

    console.print(f"\nStep 3: Updating {MANIFEST_FILE} with commit hash...")
    manifest = load_yaml(layout.manifest_path)
    submission = require_submission(manifest)
    submission["git_commit"] = commit_hash
    submission["wasm_path"] = REPRODUCIBLE_WASM_PATH
    save_yaml(layout.manifest_path, manifest, header=MANIFEST_HEADER)
    console.print(f"   Set wasm_path to {REPRODUCIBLE_WASM_PATH}")
    if not args.skip_git:
        git.add(root, layout.manifest_path)
        git.commit(root, f"Update git_commit hash for v{version}")
        git.push(root)
        console.print("   Committed and pushed.")

    if args.skip_build:
        console.print("\nStep 4: Skipping build (using existing WASM).")
    else:
        console.print("\nStep 4: Building WASM with reproducible build...")
        run_build(ctx, layout, bootstrap=True, prepare_images=True)

    console.print("\nStep 5: Publishing to registry...")
    wasm_file = ctx.resolve_path(str(layout.canister_dir / REPRODUCIBLE_WASM_PATH))
    if not wasm_file.is_file():
        wasm_file = (root / REPRODUCIBLE_WASM_PATH).resolve()
    publish_version(ctx, manifest, version, wasm_file=wasm_file)

    console.print(f"\n[bold green]Successfully released version {version}![/bold green]")
    console.print("\nNext steps:")
    console.print("   1. Check the Audit Hub UI to verify bounty creation")
    console.print("   2. Monitor verifier bots for attestations")
    console.print("   3. Wait for verifier consensus")
    return exit_codes.SUCCESS
