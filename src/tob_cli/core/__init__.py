"""Transform pipeline: property expansion, tool lookup, rewrite and orchestration."""
