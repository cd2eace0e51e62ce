"""Infrastructure: reproducible Motoko builds in docker.

The build runs inside a pinned toolchain image so that anyone can
rebuild a published WASM bit-for-bit.  Four files drive it
(:data:`REQUIRED_FILES`); :func:`bootstrap_build_files` writes them from
templates with the toolchain versions substituted.

Rules
-----
* No ``print()`` — callers handle user-facing output.
* Docker runs through :func:`~prometheus_cli.infra.process.run_command`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from prometheus_cli.exceptions import BuildError, EnvironmentCheckError, EnvironmentError
from prometheus_cli.infra.process import run_command

logger = logging.getLogger(__name__)

DEFAULT_VERSIONS: dict[str, str] = {
    "MOC_VERSION": "0.16.0",
    "IC_WASM_VERSION": "0.9.3",
    "MOPS_CLI_VERSION": "0.2.1",
}

REQUIRED_FILES: tuple[str, ...] = (
    "docker-compose.yml",
    "Dockerfile",
    "Dockerfile.base",
    "build.sh",
)

DOCKER_NETWORK = "verifier-shared-network"

_COMPOSE_MOC = re.compile(r"moc:\s*&moc\s+(\S+)")
_COMPOSE_BASE_NAME = re.compile(r"name:\s*&base_name\s+'[^']+'")


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

TEMPLATES: dict[str, str] = {
    "docker-compose.yml": r"""x-base-image:
  versions:
    moc: &moc {{MOC_VERSION}}
    ic-wasm: &ic_wasm {{IC_WASM_VERSION}}
    mops-cli: &mops-cli {{MOPS_CLI_VERSION}}
  name: &base_name 'motoko-build-base:moc-{{MOC_VERSION}}'

networks:
  default:
    external: true
    name: verifier-shared-network

services:
  base:
    build:
      context: .
      dockerfile: Dockerfile.base
      args:
        MOC_VERSION: *moc
        IC_WASM_VERSION: *ic_wasm
        MOPS_CLI_VERSION: *mops-cli
    image: *base_name
  wasm:
    depends_on:
      - base
    build:
      context: .
      args:
        IMAGE: *base_name
    volumes:
      - ./out:/project/out
    environment:
      compress: "false"
    command: bash --login build.sh
""",
    "Dockerfile": r"""ARG IMAGE
FROM --platform=linux/amd64 ${IMAGE}

WORKDIR /project

COPY mops.toml ./

# Let mops-cli install the dependencies defined in mops.toml and create
# mops.lock.
# Note: We trick mops-cli into not downloading binaries and not compiling
# anything. We also make it use the moc version from the base image.
# Accept GITHUB_TOKEN as build arg to authenticate API requests (optional)
ARG GITHUB_TOKEN
RUN mkdir -p ~/.mops/bin \
    && ln -s /usr/local/bin/moc ~/.mops/bin/moc \
    && touch ~/.mops/bin/mo-fmt \
    && if [ -n "${GITHUB_TOKEN}" ]; then export GITHUB_TOKEN="${GITHUB_TOKEN}"; fi \
    && echo "persistent actor {}" >tmp.mo \
    && mops-cli build tmp.mo -- --check \
    && rm -r tmp.mo target/tmp

COPY src /project/src/
COPY di[d] /project/did/
COPY build.sh /project

CMD ["/bin/bash"]
""",
    "Dockerfile.base": r"""ARG PLATFORM=linux/amd64
FROM --platform=${PLATFORM} alpine:latest AS build

RUN apk add --no-cache curl ca-certificates tar bash \
    && update-ca-certificates

RUN mkdir -p /install/bin

# Install ic-wasm
ARG IC_WASM_VERSION
RUN curl -L https://github.com/research-ag/ic-wasm/releases/download/${IC_WASM_VERSION}/ic-wasm-x86_64-unknown-linux-musl.tar.gz -o ic-wasm.tgz \
    && tar xzf ic-wasm.tgz \
    && install ic-wasm /install/bin

# Install mops-cli
ARG MOPS_CLI_VERSION
RUN curl -L https://github.com/prometheus-protocol/mops-cli/releases/download/v${MOPS_CLI_VERSION}/mops-cli-linux64 -o mops-cli \
    && install mops-cli /install/bin

# Install moc (use version-aware URL)
ARG MOC_VERSION
RUN version_compare() { \
      [ "$1" = "$2" ] && return 1; \
      [ "$(printf '%s\n' "$1" "$2" | sort -V | head -n1)" != "$1" ]; \
    }; \
    if version_compare "${MOC_VERSION}" "0.9.5"; then \
      curl -L https://github.com/dfinity/motoko/releases/download/${MOC_VERSION}/motoko-Linux-x86_64-${MOC_VERSION}.tar.gz -o motoko.tgz; \
    else \
      curl -L https://github.com/dfinity/motoko/releases/download/${MOC_VERSION}/motoko-linux64-${MOC_VERSION}.tar.gz -o motoko.tgz; \
    fi \
    && tar xzf motoko.tgz \
    && install moc /install/bin

FROM --platform=${PLATFORM} alpine:latest
RUN apk add bash
COPY --from=build /install/bin/* /usr/local/bin/
""",
    "build.sh": r"""#!/bin/bash

# Get moc version (extract X.Y.Z format)
MOC_VERSION=$(moc --version 2>&1 | grep -o '[0-9]\+\.[0-9]\+\.[0-9]\+' | head -n1)

# Version comparison function for Alpine (uses sort -V)
version_gte() {
  [ "$1" = "$2" ] && return 0
  [ "$(printf '%s\n' "$1" "$2" | sort -V | head -n1)" != "$1" ]
}

version_lt() {
  [ "$1" = "$2" ] && return 1
  [ "$(printf '%s\n' "$1" "$2" | sort -V | head -n1)" = "$1" ]
}

# Add --enhanced-orthogonal-persistence only for moc 0.14.4
# (earlier versions don't support it, 0.15.0+ has it as default)
PERSISTENCE_FLAG=""
if version_gte "$MOC_VERSION" "0.14.4" && version_lt "$MOC_VERSION" "0.15.0"; then
    PERSISTENCE_FLAG="--enhanced-orthogonal-persistence"
fi

MOC_GC_FLAGS="" ## place any additional flags like compacting-gc, incremental-gc here
MOC_FLAGS="$MOC_GC_FLAGS $PERSISTENCE_FLAG -no-check-ir --release --public-metadata candid:service --public-metadata candid:args"
OUT=out/out_$(uname -s)_$(uname -m).wasm
mops-cli build --lock --name out src/main.mo -- $MOC_FLAGS
cp target/out/out.wasm $OUT
ic-wasm $OUT -o $OUT shrink
if [ -f did/service.did ]; then
    echo "Adding service.did to metadata section."
    ic-wasm $OUT -o $OUT metadata candid:service -f did/service.did -v public
else
    echo "service.did not found. Skipping metadata update."
fi
if [ "$compress" == "yes" ] || [ "$compress" == "y" ]; then
  gzip -nf $OUT
  sha256sum $OUT.gz
else
  sha256sum $OUT
fi
""",
}


# ---------------------------------------------------------------------------
# Build files
# ---------------------------------------------------------------------------

def missing_build_files(root: Path) -> list[str]:
    """Return the required build files absent from *root*."""
    return [name for name in REQUIRED_FILES if not (root / name).is_file()]


def validate_motoko_project(canister_dir: Path) -> list[str]:
    """Return what *canister_dir* lacks to be buildable (only ``src``)."""
    return [name for name in ("src",) if not (canister_dir / name).exists()]


def render_template(name: str, versions: dict[str, str]) -> str:
    content = TEMPLATES[name]
    for key, value in versions.items():
        content = content.replace(f"{{{{{key}}}}}", value)
    return content


def bootstrap_build_files(
    root: Path,
    *,
    moc_version: str | None = None,
    ic_wasm_version: str | None = None,
    mops_cli_version: str | None = None,
) -> list[Path]:
    """Write every build file into *root* and create ``out/``.

    Existing files are overwritten.  Returns the written paths.
    """
    versions = {
        "MOC_VERSION": moc_version or DEFAULT_VERSIONS["MOC_VERSION"],
        "IC_WASM_VERSION": ic_wasm_version or DEFAULT_VERSIONS["IC_WASM_VERSION"],
        "MOPS_CLI_VERSION": mops_cli_version or DEFAULT_VERSIONS["MOPS_CLI_VERSION"],
    }
    written: list[Path] = []
    for name in TEMPLATES:
        path = root / name
        path.write_text(render_template(name, versions), encoding="utf-8")
        if name == "build.sh":
            path.chmod(0o755)
        written.append(path)
    (root / "out").mkdir(parents=True, exist_ok=True)
    logger.debug("Bootstrapped build files in %s with %s", root, versions)
    return written


def sync_compose_moc_version(root: Path, moc_version: str) -> str | None:
    """Align ``docker-compose.yml`` with the moc version from ``mops.toml``.

    Returns the previous version when the file was changed, else ``None``.
    """
    compose = root / "docker-compose.yml"
    if not compose.is_file():
        return None
    content = compose.read_text(encoding="utf-8")
    match = _COMPOSE_MOC.search(content)
    if match is None or match.group(1) == moc_version:
        return None
    content = _COMPOSE_MOC.sub(f"moc: &moc {moc_version}", content, count=1)
    content = _COMPOSE_BASE_NAME.sub(
        f"name: &base_name 'motoko-build-base:moc-{moc_version}'",
        content,
        count=1,
    )
    compose.write_text(content, encoding="utf-8")
    return match.group(1)


# ---------------------------------------------------------------------------
# Docker
# ---------------------------------------------------------------------------

def require_docker() -> None:
    """Raise :class:`EnvironmentCheckError` unless ``docker`` runs."""
    try:
        run_command(["docker", "--version"], error_cls=EnvironmentCheckError)
    except EnvironmentError as exc:
        raise EnvironmentCheckError(
            "Docker is not installed or not running.",
            hint="Install Docker: https://docs.docker.com/get-docker/",
        ) from exc


def ensure_docker_network(name: str = DOCKER_NETWORK) -> bool:
    """Create the shared docker network if missing; returns ``True`` if created."""
    try:
        run_command(["docker", "network", "inspect", name], error_cls=BuildError)
        return False
    except BuildError:
        run_command(["docker", "network", "create", name], error_cls=BuildError)
        return True


def ensure_base_image(root: Path, moc_version: str) -> bool:
    """Build the toolchain base image if absent; returns ``True`` if built."""
    image = f"motoko-build-base:moc-{moc_version}"
    try:
        run_command(["docker", "image", "inspect", image], error_cls=BuildError)
        return False
    except BuildError:
        run_command(["docker-compose", "build", "base"], error_cls=BuildError, cwd=root, capture=False)
        return True


def docker_build(root: Path, *, github_token: str | None = None, clean: bool = False) -> None:
    """Run the reproducible build; the WASM lands in ``<root>/out``."""
    build = ["docker-compose", "build", "--no-cache"]
    if github_token:
        build += ["--build-arg", f"GITHUB_TOKEN={github_token}"]
    run_command(build, error_cls=BuildError, cwd=root, capture=False)
    run_command(["docker-compose", "run", "--rm", "wasm"], error_cls=BuildError, cwd=root, capture=False)
    if clean:
        remove_images(root)


def remove_images(root: Path) -> None:
    run_command(["docker-compose", "down", "--rmi", "local"], error_cls=BuildError, cwd=root, capture=False)
