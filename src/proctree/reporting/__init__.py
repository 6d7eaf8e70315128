from proctree.reporting.logging_bridge import install_logging_bridge

__all__ = ["install_logging_bridge"]
