"""Tool support for mcpmux."""
