"""Site build error hierarchy.

Every error the build raises inherits from SiteBuildError, so the CLI can
catch one type at its boundary and exit non-zero.

Hierarchy (subclasses defined beside the code that raises them):
    SiteBuildError              # this module
    ├── ConfigurationError      # config.py
    ├── ContentParseError       # content/loader.py
    ├── ArtifactWriteError      # blog/writer.py
    └── BuildError              # pipeline/build.py
"""

from __future__ import annotations


class SiteBuildError(Exception):
    """Base class for all site build errors."""
