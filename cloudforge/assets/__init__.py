"""Non-HTML build stages: stylesheets, dependency copies and cleaning."""
