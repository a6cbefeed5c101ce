"""Utils - Validadores de entrada."""
