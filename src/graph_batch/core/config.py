"""Configuration for Graph API access."""

import os
from dataclasses import dataclass

DEFAULT_GRAPH_SERVER = "graph.facebook.com"
DEFAULT_BETA_GRAPH_SERVER = "graph.beta.facebook.com"


@dataclass
class GraphConfig:
    """Where and how Graph requests are sent."""

    graph_server: str = DEFAULT_GRAPH_SERVER
    beta_graph_server: str = DEFAULT_BETA_GRAPH_SERVER
    api_version: str | None = None  # e.g. "v19.0"; None = unversioned calls
    use_ssl: bool = True
    beta: bool = False
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "GraphConfig":
        """Build a config from GRAPH_* environment variables, defaults elsewhere."""
        config = cls()
        if os.environ.get("GRAPH_API_VERSION"):
            config.api_version = os.environ["GRAPH_API_VERSION"]
        if os.environ.get("GRAPH_SERVER"):
            config.graph_server = os.environ["GRAPH_SERVER"]
        if os.environ.get("GRAPH_TIMEOUT"):
            config.timeout = float(os.environ["GRAPH_TIMEOUT"])
        config.validate()
        return config

    @property
    def server(self) -> str:
        return self.beta_graph_server if self.beta else self.graph_server

    @property
    def base_url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.server}"

    def validate(self) -> None:
        """Validate graph configuration."""
        if not self.graph_server:
            raise ValueError(
                "graph_server must be a non-empty host name. "
                "Set config.graph_server (default: graph.facebook.com)."
            )
        if "://" in self.graph_server or "://" in self.beta_graph_server:
            raise ValueError(
                f"graph_server must not include a scheme (got {self.graph_server!r}). "
                f"Use config.use_ssl to choose between http and https."
            )
        if self.api_version is not None and not self.api_version.startswith("v"):
            raise ValueError(
                f"api_version must look like 'v19.0' (got {self.api_version!r}). "
                f"Set config.api_version to None for unversioned calls."
            )
        if self.timeout <= 0:
            raise ValueError(
                f"timeout must be > 0 (got {self.timeout}). "
                f"Set config.timeout to a positive number in seconds (typical: 10-60)."
            )
