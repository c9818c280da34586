"""Maven repository layout, sources, settings and POM loading."""
