"""HTML compilation: templates, metadata, components, layouts and pages."""
