"""Test fixtures for EphysForge unit and integration tests.

Fixtures:
    - quiet_config.yml: Noise-free, seeded configuration for CLI and
      engine tests
"""
