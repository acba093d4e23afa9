"""TianguiStore front-controller service package."""
