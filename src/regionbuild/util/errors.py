# src/regionbuild/util/errors.py: Typed exceptions and exit codes.
# The decision engine sorts failures into three kinds: configuration problems
# resolve locally to "no build", while resolution and unexpected failures are
# turned into the configured fail-policy decision.

class RegionBuildError(Exception):
    """Base exception for the application."""
    exit_code = 1

class ConfigError(RegionBuildError):
    """Configuration-related errors."""
    exit_code = 2

class ResolutionError(RegionBuildError):
    """An SCM collaborator could not resolve an owner, filesystem view or branch tip."""
    exit_code = 3

class GitError(ResolutionError):
    """Git command errors."""
    exit_code = 3

class UnexpectedError(RegionBuildError):
    """Any other failure raised while computing a decision."""
    exit_code = 4
