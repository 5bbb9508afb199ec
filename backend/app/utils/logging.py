import logging


def configure_logging(level: str = "INFO", force: bool = False):
    """Set up the root logger once; pass force=True to reconfigure."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=force,
    )
