"""Dashboard API for the health and safety document portal."""
