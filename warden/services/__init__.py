"""Auth domain services and the user directory."""
