"""Named workload profiles."""

from .builtin import BUILTIN_PROFILES
from .catalog import (
    ProfileCatalog,
    build_planner,
    catalog_from_configs,
    default_catalog,
    load_profiles_yaml,
)
from .schema import ProfileConfig

__all__ = [
    "BUILTIN_PROFILES",
    "ProfileCatalog",
    "ProfileConfig",
    "build_planner",
    "catalog_from_configs",
    "default_catalog",
    "load_profiles_yaml",
]
