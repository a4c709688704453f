"""Development mode: watch sources, rebuild, serve with live reload."""
