"""migration-analyzer: size a GitHub or Azure DevOps organization for migration."""

__version__ = "0.1.0"
