from pagedeploy.core.site_builder.abc import DEFAULT_BUILD_COMMAND, SiteBuilder, build_args
from pagedeploy.core.site_builder.dry_run import DryRunSiteBuilder
from pagedeploy.core.site_builder.real import RealSiteBuilder

__all__ = [
    "DEFAULT_BUILD_COMMAND",
    "DryRunSiteBuilder",
    "RealSiteBuilder",
    "SiteBuilder",
    "build_args",
]
