"""Run configuration: defaults, YAML loading and validation."""
