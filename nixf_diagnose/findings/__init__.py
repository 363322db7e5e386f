# Analyzer diagnostics and renderable reports.
