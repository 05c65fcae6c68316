"""Run the mock LEGO API: python -m legoview.mock_servers"""

from pathlib import Path
from typing import Optional

import click
import uvicorn

from legoview.mock_servers.app import create_mock_app
from legoview.models.config import ConfigManager


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    default="config/config.yaml",
    help="Path to configuration YAML file",
)
@click.option("--port", type=int, help="Port to listen on (overrides config)")
@click.option("--deals", "deal_count", type=int, default=40, show_default=True, help="Number of deals to serve")
@click.option("--seed", type=int, default=42, show_default=True, help="Random seed for generated data")
@click.option("--error-rate", type=click.FloatRange(0.0, 1.0), default=0.0, show_default=True)
def serve(config: Path, port: Optional[int], deal_count: int, seed: int, error_rate: float) -> None:
    """Serve deterministic deals and sales on localhost."""
    viewer_config = ConfigManager(config).load_config()
    app = create_mock_app(deal_count=deal_count, random_seed=seed, error_rate=error_rate)
    uvicorn.run(
        app,
        host="127.0.0.1",
        port=port or viewer_config.mock_server_port,
        log_level=viewer_config.log_level.lower(),
    )


if __name__ == "__main__":
    serve()
