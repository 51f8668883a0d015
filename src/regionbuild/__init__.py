# src/regionbuild/__init__.py: Included-region build trigger strategy.
# Decides whether a branch or pull-request update should start a build by
# matching the files it changed against a set of Ant-style path regions.

__version__ = "0.1.0"
