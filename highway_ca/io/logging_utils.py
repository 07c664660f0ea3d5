import logging


def setup_logging(level: int = logging.INFO, verbose: bool = False):
    """Configure the root handler; verbose switches the package to DEBUG."""
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.setLevel(logging.DEBUG if verbose else level)


logger = logging.getLogger("highway_ca")
