"""Build pipeline that drives a full site build."""

from pipeline.build import BuildError, BuildStage, SiteBuilder, run_build

__all__ = ["BuildError", "BuildStage", "SiteBuilder", "run_build"]
