"""Assembly pipeline: configuration units and the builder running them."""

from cfgforge.pipeline.builder import Builder, BuildReport
from cfgforge.pipeline.unit import ConfigUnit

__all__ = ["Builder", "BuildReport", "ConfigUnit"]
