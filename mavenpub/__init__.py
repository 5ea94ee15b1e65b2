"""
mavenpub package

This package configures Maven publishing for a build project and keeps the
installation instructions of its README in sync.

Key responsibilities are split across modules:
- `credentials.py`: detect which publishing credentials the environment provides
- `publishing.py`: populate the build-project model (repositories, POM, signing)
- `readme.py`: version extraction, installation snippets, README section replacement
- `staging.py`: isolated Nexus staging REST API interactions (close / release)
- `config.py`: parse `.mavenpub.yml` into a typed model
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
