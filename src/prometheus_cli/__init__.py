"""prometheus-cli — command-line tools for the Prometheus App Store.

Publishes, verifies, audits and manages canister applications through a
strict layered architecture (cli / core / infra).
"""

from prometheus_cli.version import __version__

__all__: list[str] = ["__version__"]
