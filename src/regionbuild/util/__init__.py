# src/regionbuild/util/__init__.py: Shared helpers (errors, logging, paths).
