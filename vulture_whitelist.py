# Vulture whitelist - False positives for vulture dead code detection
#
# These are not dead code - they are:
# 1. Typer callback parameters (used by framework)
# 2. Pydantic configuration read by the framework

# Typer callback parameters - used by Typer framework for CLI options
version  # cli/main.py - Typer callback parameter

# Pydantic model_config (used internally by Pydantic v2)
model_config  # models.py, utils/config.py
