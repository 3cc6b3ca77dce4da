"""Command-line shell; run as ``ecs-normalizer`` or ``python -m ecs_normalizer.cli``."""
